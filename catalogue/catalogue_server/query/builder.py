"""
List query compilation.

A ListQuery describes one page of an entity listing: text filter, sort,
publisher scope, parent scope, enum filters and pagination. QueryBuilder
compiles it against an EntityDef into parameterized SQL.

Invariants:
    - Only names declared on the EntityDef reach the SQL text; every
      caller-supplied value is a bound parameter
    - Ordering is total: the requested field, then the key columns ascending
    - count() uses exactly the WHERE clause of select()
    - limit and offset are non-negative
    - The text filter compares casefolded text, so it needs the casefold()
      SQL function that ConnectionPool registers on every connection

Example:
    >>> builder = QueryBuilder(WORK, resolver.chain("work"))
    >>> compiled = builder.select(ListQuery(limit=10, filter="water"))
    >>> conn.execute(compiled.sql, compiled.params).fetchall()
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..access.ownership import OwnershipChain
from ..schema.types import EntityDef, OrderBy

BASE_ALIAS = "t0"
CASEFOLD_FUNCTION = "casefold"


def casefold(value: Optional[str]) -> Optional[str]:
    """SQL casefold(): Unicode case folding, NULL stays NULL."""
    return None if value is None else str(value).casefold()


@dataclass(frozen=True)
class ListQuery:
    """Parameters of a list or count request.

    Attributes:
        limit: Maximum rows to return
        offset: Rows to skip
        filter: Case-insensitive substring matched against the text columns
        order: Sort field and direction (entity default when None)
        publishers: Restrict to entities owned by these publishers
        parent_id: Equality on the first scope column
        secondary_parent_id: Equality on the second scope column
        type_filters: Enum column -> accepted values
    """

    limit: int = 100
    offset: int = 0
    filter: Optional[str] = None
    order: Optional[OrderBy] = None
    publishers: Sequence[uuid.UUID] = ()
    parent_id: Optional[uuid.UUID] = None
    secondary_parent_id: Optional[uuid.UUID] = None
    type_filters: Mapping[str, Sequence[Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.limit < 0:
            raise ValueError(f"limit must be non-negative, got {self.limit}")
        if self.offset < 0:
            raise ValueError(f"offset must be non-negative, got {self.offset}")
        object.__setattr__(self, "publishers", tuple(self.publishers))


@dataclass(frozen=True)
class CompiledQuery:
    sql: str
    params: tuple


def escape_like(needle: str) -> str:
    """Escape LIKE wildcards so the needle matches literally."""
    return needle.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class QueryBuilder:
    """Compiles ListQuery instances for one entity.

    Args:
        entity_def: Entity to list
        chain: Ownership chain used for publisher scope (None when unowned)
    """

    def __init__(self, entity_def: EntityDef, chain: Optional[OwnershipChain]) -> None:
        self.entity_def = entity_def
        self.chain = chain

    def select(self, query: ListQuery) -> CompiledQuery:
        from_sql, where_sql, params = self._from_where(query)
        order_sql = self._order_by(query.order)
        sql = (
            f"SELECT {BASE_ALIAS}.* {from_sql}{where_sql} "
            f"ORDER BY {order_sql} LIMIT ? OFFSET ?"
        )
        return CompiledQuery(sql, (*params, query.limit, query.offset))

    def count(self, query: ListQuery) -> CompiledQuery:
        from_sql, where_sql, params = self._from_where(query)
        return CompiledQuery(f"SELECT COUNT(*) {from_sql}{where_sql}", tuple(params))

    def _from_where(self, query: ListQuery) -> tuple[str, str, list[Any]]:
        entity_def = self.entity_def
        parts = [f"FROM {entity_def.table} {BASE_ALIAS}"]
        conditions: list[str] = []
        params: list[Any] = []

        # Unowned entities are shared across publishers: scope does not apply.
        if query.publishers and self.chain is not None:
            joins, publisher_expr = self.chain.joins(BASE_ALIAS)
            parts.extend(joins)
            placeholders = ", ".join("?" for _ in query.publishers)
            conditions.append(f"{publisher_expr} IN ({placeholders})")
            params.extend(str(p) for p in query.publishers)

        if query.filter and entity_def.text_columns:
            needle = f"%{escape_like(query.filter.casefold())}%"
            matches = [
                f"{CASEFOLD_FUNCTION}({BASE_ALIAS}.{name}) LIKE ? ESCAPE '\\'"
                for name in entity_def.text_columns
            ]
            conditions.append("(" + " OR ".join(matches) + ")")
            params.extend(needle for _ in matches)

        for position, value in enumerate((query.parent_id, query.secondary_parent_id)):
            if value is None:
                continue
            if position >= len(entity_def.scope_columns):
                raise ValueError(
                    f"Entity '{entity_def.name}' has no scope column for parent #{position + 1}"
                )
            name = entity_def.scope_columns[position]
            conditions.append(f"{BASE_ALIAS}.{name} = ?")
            params.append(entity_def.get_column(name).to_db(value))

        for name, values in query.type_filters.items():
            if name not in entity_def.type_filter_columns:
                raise ValueError(f"'{name}' is not a type filter of entity '{entity_def.name}'")
            values = list(values)
            if not values:
                # An empty list means no filter on this column.
                continue
            col = entity_def.get_column(name)
            placeholders = ", ".join("?" for _ in values)
            conditions.append(f"{BASE_ALIAS}.{name} IN ({placeholders})")
            params.extend(col.to_db(v) for v in values)

        where_sql = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        return " ".join(parts), where_sql, params

    def _order_by(self, order: Optional[OrderBy]) -> str:
        entity_def = self.entity_def
        order = order or entity_def.default_order
        if not isinstance(order.field, entity_def.order_fields):
            raise ValueError(
                f"{order.field!r} is not a sortable field of entity '{entity_def.name}'"
            )
        terms = [f"{BASE_ALIAS}.{order.field.value} {order.direction.value}"]
        terms.extend(f"{BASE_ALIAS}.{name} ASC" for name in entity_def.key)
        return ", ".join(terms)


def order_field(entity_def: EntityDef, name: str) -> Enum:
    """Look up a sortable field by column name.

    Raises:
        ValueError: If the entity has no such sortable field
    """
    for member in entity_def.order_fields:
        if member.value == name:
            return member
    raise ValueError(f"'{name}' is not a sortable field of entity '{entity_def.name}'")
