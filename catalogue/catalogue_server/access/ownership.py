"""
Ownership resolution for catalogue entities.

Every owned entity belongs to exactly one Publisher, found by walking
parent links up to the Imprint (whose publisher_id names the owner):

    Location -> Publication -> Work -> Imprint.publisher_id

The walk is described once per entity as an OwnershipChain. The resolver
turns a chain into a single join query; the query builder reuses the same
chain to scope list queries to a set of publishers.

Invariants:
    - Publisher resolves to itself
    - Unowned entities (Contributor, Funder) have no chain and resolve to None
    - A key with no matching row, or a broken link, raises EntityNotFound
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from ..errors import EntityNotFound
from ..schema.registry import SchemaRegistry
from ..schema.types import EntityDef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OwnershipChain:
    """Join path from an entity table to the column naming its publisher.

    Attributes:
        entity: The entity the chain starts from
        ancestors: Parent entities that must be joined, nearest first.
            The root Publisher is never joined; the last ancestor (or the
            entity itself) carries the publisher reference.
    """

    entity: EntityDef
    ancestors: tuple[EntityDef, ...]

    def joins(self, base_alias: str) -> tuple[list[str], str]:
        """Build JOIN clauses and the publisher id expression.

        Args:
            base_alias: SQL alias of the entity's own table

        Returns:
            (join clauses, expression evaluating to the owning publisher id)
        """
        clauses: list[str] = []
        child = self.entity
        child_alias = base_alias
        for depth, ancestor in enumerate(self.ancestors, start=1):
            alias = f"o{depth}"
            clauses.append(
                f"INNER JOIN {ancestor.table} {alias} "
                f"ON {alias}.{ancestor.key[0]} = {child_alias}.{child.parent.column}"
            )
            child, child_alias = ancestor, alias

        if child.parent is None:
            # The chain starts at the root itself.
            return clauses, f"{child_alias}.{child.key[0]}"
        return clauses, f"{child_alias}.{child.parent.column}"


def build_chain(registry: SchemaRegistry, name: str) -> Optional[OwnershipChain]:
    """Derive the ownership chain of an entity from its parent links."""
    entity_def = registry.require(name)
    if not entity_def.owned:
        return None
    path = registry.ownership_chain(name)
    # path = [entity, parent, ..., root]; the root is referenced, not joined.
    return OwnershipChain(entity=entity_def, ancestors=tuple(path[1:-1]))


class OwnershipResolver:
    """Resolves the owning publisher of any catalogue entity.

    Thread safety:
        Chains are computed once at construction; the resolver holds no
        connection and is safe to share.

    Example:
        >>> resolver = OwnershipResolver(get_registry())
        >>> resolver.resolve(conn, "location", location_id)
        UUID('...')
    """

    def __init__(self, registry: SchemaRegistry) -> None:
        self._registry = registry
        self._chains: dict[str, Optional[OwnershipChain]] = {
            entity_def.name: build_chain(registry, entity_def.name)
            for entity_def in registry.entities()
        }

    def chain(self, name: str) -> Optional[OwnershipChain]:
        if name not in self._chains:
            raise KeyError(f"Unknown entity '{name}'")
        return self._chains[name]

    def resolve(self, conn: sqlite3.Connection, kind: str, key: Any) -> Optional[uuid.UUID]:
        """Find the publisher owning the entity `kind` identified by `key`.

        Args:
            conn: Open connection
            kind: Registered entity name
            key: Bare key value, or a tuple for composite keys

        Returns:
            Owning publisher id, or None for unowned entities

        Raises:
            EntityNotFound: If the entity or a link in its chain is missing
        """
        chain = self.chain(kind)
        if chain is None:
            return None

        entity_def = chain.entity
        values = entity_def.normalize_key(key)
        joins, publisher_expr = chain.joins("t0")
        where = " AND ".join(f"t0.{name} = ?" for name in entity_def.key)
        sql = " ".join(
            [f"SELECT {publisher_expr} AS publisher_id FROM {entity_def.table} t0", *joins, f"WHERE {where}"]
        )
        params = tuple(col.to_db(value) for col, value in zip(entity_def.key_columns, values))

        row = conn.execute(sql, params).fetchone()
        if row is None:
            logger.debug(f"Ownership lookup found nothing for {kind} {key}")
            raise EntityNotFound(kind, key)
        return uuid.UUID(row["publisher_id"])

    def owner_of(self, conn: sqlite3.Connection, entity_def: EntityDef, obj: Any) -> Optional[uuid.UUID]:
        """Publisher owning an entity, patch or new projection.

        The owner is read through the object's parent reference, so a patch
        resolves to the owner it would have after the update.
        """
        if not entity_def.owned:
            return None
        if entity_def.parent is None:
            return getattr(obj, entity_def.key[0])
        return self.resolve(conn, entity_def.parent.entity, getattr(obj, entity_def.parent.column))
