"""
Schema Registry for the catalogue.

The SchemaRegistry is the central authority for entity definitions.
It provides:
- Registration of entity definitions
- Lookup by entity name
- Schema fingerprinting for consistency checks
- Freeze mechanism to prevent runtime modifications

Invariants:
    - Registry is mutable during startup, frozen before serving
    - Once frozen, no new entities can be registered
    - Entity names and table names are unique
    - Fingerprint changes when schema changes

How to change safely:
    - Register all entities before calling freeze()
    - Run validate_all() in tests after changing a declaration
    - Never modify registered entities after freeze

Example:
    >>> from catalogue.catalogue_server.schema import SchemaRegistry, WORK
    >>> registry = SchemaRegistry()
    >>> registry.register(WORK)
    >>> registry.get("work").table
    'work'
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
import logging
import threading
from typing import Dict, Iterator, Optional

from .entities import ALL_ENTITIES
from .types import EntityDef

logger = logging.getLogger(__name__)

# Global registry instance
_global_registry: Optional[SchemaRegistry] = None
_registry_lock = threading.Lock()


class RegistryFrozenError(Exception):
    """Raised when attempting to modify a frozen registry."""
    pass


class DuplicateRegistrationError(Exception):
    """Raised when attempting to register a duplicate entity or table."""
    pass


class SchemaRegistry:
    """Central registry for all entity definitions.

    Thread-safety:
        - Registration is thread-safe (uses internal lock)
        - Lookups after freeze are lock-free
        - Freeze is atomic and irreversible

    Attributes:
        frozen: Whether the registry is frozen (immutable)
        fingerprint: SHA-256 hash of the schema (computed on freeze)
    """

    def __init__(self) -> None:
        """Initialize an empty, mutable registry."""
        self._entities: Dict[str, EntityDef] = {}
        self._tables: Dict[str, EntityDef] = {}
        self._frozen = False
        self._fingerprint: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def frozen(self) -> bool:
        """Whether the registry is frozen."""
        return self._frozen

    @property
    def fingerprint(self) -> Optional[str]:
        """Schema fingerprint (available after freeze)."""
        return self._fingerprint

    def register(self, entity_def: EntityDef) -> None:
        """Register an entity definition.

        Raises:
            RegistryFrozenError: If registry is frozen
            DuplicateRegistrationError: If name or table is already registered
        """
        with self._lock:
            if self._frozen:
                raise RegistryFrozenError(
                    f"Cannot register entity '{entity_def.name}': registry is frozen"
                )

            if entity_def.name in self._entities:
                raise DuplicateRegistrationError(
                    f"Entity '{entity_def.name}' already registered"
                )

            if entity_def.table in self._tables:
                existing = self._tables[entity_def.table]
                raise DuplicateRegistrationError(
                    f"Table '{entity_def.table}' already registered by '{existing.name}'"
                )

            if entity_def.parent is not None and entity_def.parent.entity not in self._entities:
                logger.warning(
                    f"Entity '{entity_def.name}' references unregistered parent "
                    f"'{entity_def.parent.entity}'"
                )

            self._entities[entity_def.name] = entity_def
            self._tables[entity_def.table] = entity_def
            logger.debug(f"Registered entity: {entity_def.name} (table={entity_def.table})")

    def get(self, name: str) -> Optional[EntityDef]:
        """Get an entity definition by name."""
        return self._entities.get(name)

    def require(self, name: str) -> EntityDef:
        """Get an entity definition by name, raising KeyError if unknown."""
        entity_def = self._entities.get(name)
        if entity_def is None:
            raise KeyError(f"Unknown entity '{name}'")
        return entity_def

    def entities(self) -> Iterator[EntityDef]:
        """Iterate over registered entities in registration order."""
        yield from self._entities.values()

    def __contains__(self, name: object) -> bool:
        return name in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def freeze(self) -> str:
        """Freeze the registry and compute fingerprint.

        Returns:
            Schema fingerprint string

        Raises:
            RegistryFrozenError: If already frozen
        """
        with self._lock:
            if self._frozen:
                raise RegistryFrozenError("Registry is already frozen")

            self._fingerprint = self._compute_fingerprint()
            self._frozen = True
            logger.info(
                f"Schema registry frozen with {len(self._entities)} entities, "
                f"fingerprint={self._fingerprint}"
            )
            return self._fingerprint

    def _compute_fingerprint(self) -> str:
        schema_dict = self.to_dict()
        canonical = json.dumps(schema_dict, sort_keys=True, separators=(',', ':'))
        hash_bytes = hashlib.sha256(canonical.encode('utf-8')).hexdigest()
        return f"sha256:{hash_bytes}"

    def to_dict(self) -> dict:
        """Convert registry to dictionary representation, sorted by name."""
        return {
            "entities": [
                self._entities[name].to_dict() for name in sorted(self._entities)
            ],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    def ownership_chain(self, name: str) -> list[EntityDef]:
        """Entities from `name` up to its root, following parent links.

        The first element is the entity itself; the last has no parent.
        """
        chain: list[EntityDef] = []
        current: Optional[EntityDef] = self.require(name)
        while current is not None:
            if current in chain:
                raise ValueError(f"Ownership cycle through entity '{current.name}'")
            chain.append(current)
            current = self.require(current.parent.entity) if current.parent else None
        return chain

    def validate_all(self) -> list[str]:
        """Validate all registered entities for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        for entity_def in self._entities.values():
            if entity_def.parent is not None:
                parent = self._entities.get(entity_def.parent.entity)
                if parent is None:
                    errors.append(
                        f"Entity '{entity_def.name}' references unknown parent "
                        f"'{entity_def.parent.entity}'"
                    )
                elif not entity_def.owned:
                    errors.append(f"Unowned entity '{entity_def.name}' cannot have a parent")

            column_names = [c.name for c in entity_def.columns]
            for cls, expected in (
                (entity_def.entity_cls, column_names),
                (entity_def.new_cls, [c.name for c in entity_def.new_columns]),
                (entity_def.patch_cls, list(entity_def.key) + [c.name for c in entity_def.mutable_columns]),
            ):
                fields = {f.name for f in dataclasses.fields(cls)}
                if fields != set(expected):
                    errors.append(
                        f"{cls.__name__} fields do not match '{entity_def.name}' columns: "
                        f"missing {sorted(set(expected) - fields)}, "
                        f"extra {sorted(fields - set(expected))}"
                    )

        for entity_def in self._entities.values():
            if entity_def.parent is None or entity_def.parent.entity not in self._entities:
                continue
            try:
                self.ownership_chain(entity_def.name)
            except (KeyError, ValueError) as e:
                errors.append(str(e))

        return errors


def build_registry() -> SchemaRegistry:
    """Create a registry holding every catalogue entity."""
    registry = SchemaRegistry()
    for entity_def in ALL_ENTITIES:
        registry.register(entity_def)
    return registry


def get_registry() -> SchemaRegistry:
    """Get the global schema registry, built and frozen on first use."""
    global _global_registry
    with _registry_lock:
        if _global_registry is None:
            _global_registry = build_registry()
            _global_registry.freeze()
        return _global_registry


def reset_registry() -> None:
    """Reset the global registry (for testing only)."""
    global _global_registry
    with _registry_lock:
        _global_registry = None
