"""
Core type definitions for the catalogue schema model.

This module defines the building blocks of the static entity registry:
- ColumnDef: One stored column of an entity table
- ParentLink: The foreign key that makes another entity this one's owner
- EntityDef: Everything the query builder and CRUD engine need about a table
- OrderBy / Direction: A sort specification restricted to an entity's fields

Invariants:
    - Column names are identical to the field names of the entity dataclass
    - Every name that ends up in SQL text comes from an EntityDef, never
      from caller input
    - Sortable fields form a closed Enum per entity whose values are columns
    - Key columns never change after creation

How to change safely:
    - Add a column by adding a ColumnDef, a dataclass field and a DDL column
    - Add an entity by declaring an EntityDef in entities.py and its DDL
    - Run SchemaRegistry.validate_all() in tests after any change

Example:
    >>> title = column("full_title", "str")
    >>> title.to_db("A Title")
    'A Title'
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any


class ColumnKind(Enum):
    """Supported column types.

    These map to SQLite storage representations and JSON snapshot values.
    """

    UUID = "uuid"  # TEXT, canonical hyphenated form
    STRING = "str"
    INTEGER = "int"
    FLOAT = "float"
    BOOLEAN = "bool"  # INTEGER 0/1
    DATE = "date"  # TEXT, YYYY-MM-DD
    TIMESTAMP = "timestamp"  # TEXT, ISO 8601 UTC with microseconds
    ENUM = "enum"  # TEXT, the enum member's value

    @classmethod
    def from_str(cls, value: str) -> ColumnKind:
        """Convert string representation to ColumnKind.

        Raises:
            ValueError: If value is not a valid column kind
        """
        for kind in cls:
            if kind.value == value:
                return kind
        valid = [k.value for k in cls]
        raise ValueError(f"Invalid column kind '{value}'. Valid kinds: {valid}")


class Direction(Enum):
    """Sort direction."""

    ASC = "ASC"
    DESC = "DESC"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    # Fixed width keeps lexical order equal to chronological order.
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


@dataclass(frozen=True)
class ColumnDef:
    """Definition of one stored column.

    Attributes:
        name: Column name (also the dataclass field name)
        kind: Storage type
        nullable: Whether NULL is allowed
        enum_type: Enum class for ENUM columns
        generated: Filled by the server on create (UUID key, timestamps)
    """

    name: str
    kind: ColumnKind
    nullable: bool = False
    enum_type: type[Enum] | None = None
    generated: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Column name cannot be empty")
        if self.kind == ColumnKind.ENUM and self.enum_type is None:
            raise ValueError(f"enum_type required for ENUM column '{self.name}'")
        if self.kind != ColumnKind.ENUM and self.enum_type is not None:
            raise ValueError(f"enum_type only allowed on ENUM columns, got '{self.name}'")

    def to_db(self, value: Any) -> Any:
        """Convert a Python value to its SQLite representation."""
        if value is None:
            return None
        if self.kind == ColumnKind.UUID:
            return str(value)
        if self.kind == ColumnKind.ENUM:
            return value.value if isinstance(value, Enum) else self.enum_type(value).value
        if self.kind == ColumnKind.BOOLEAN:
            return 1 if value else 0
        if self.kind == ColumnKind.DATE:
            return value.isoformat()
        if self.kind == ColumnKind.TIMESTAMP:
            return format_timestamp(value)
        return value

    def from_db(self, value: Any) -> Any:
        """Convert a SQLite value back to its Python representation."""
        if value is None:
            return None
        if self.kind == ColumnKind.UUID:
            return uuid.UUID(value)
        if self.kind == ColumnKind.ENUM:
            return self.enum_type(value)
        if self.kind == ColumnKind.BOOLEAN:
            return bool(value)
        if self.kind == ColumnKind.DATE:
            return date.fromisoformat(value)
        if self.kind == ColumnKind.TIMESTAMP:
            return datetime.fromisoformat(value)
        if self.kind == ColumnKind.FLOAT:
            return float(value)
        return value

    def to_json(self, value: Any) -> Any:
        """Convert a Python value to a JSON-compatible value for snapshots."""
        if self.kind in (ColumnKind.BOOLEAN, ColumnKind.INTEGER, ColumnKind.FLOAT):
            return value
        return self.to_db(value)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "kind": self.kind.value}
        if self.nullable:
            result["nullable"] = True
        if self.enum_type is not None:
            result["enum_values"] = [m.value for m in self.enum_type]
        if self.generated:
            result["generated"] = True
        return result


def column(
    name: str,
    kind: str | ColumnKind,
    *,
    nullable: bool = False,
    enum_type: type[Enum] | None = None,
    generated: bool = False,
) -> ColumnDef:
    """Convenience function to create a ColumnDef.

    Example:
        >>> column("doi", "str", nullable=True)
        >>> column("work_type", "enum", enum_type=WorkType)
    """
    if isinstance(kind, str):
        kind = ColumnKind.from_str(kind)
    return ColumnDef(
        name=name,
        kind=kind,
        nullable=nullable,
        enum_type=enum_type,
        generated=generated,
    )


@dataclass(frozen=True)
class ParentLink:
    """Foreign key pointing at the owning parent entity.

    Attributes:
        column: Foreign key column on the child table
        entity: Registered name of the parent entity
    """

    column: str
    entity: str


@dataclass(frozen=True)
class OrderBy:
    """Field and direction to sort a list by.

    Attributes:
        field: Member of the entity's *Field enum
        direction: Sort direction
    """

    field: Enum
    direction: Direction = Direction.ASC


@dataclass(frozen=True)
class EntityDef:
    """Static description of one catalogue entity.

    Attributes:
        name: Registered entity name (e.g. "work")
        table: Table name
        key: Key column names (one UUID column, or a composite)
        columns: All stored columns in table order
        entity_cls: Dataclass returned on read
        new_cls: Dataclass accepted by create
        patch_cls: Dataclass accepted by update
        order_fields: Closed Enum of sortable fields (values are column names)
        default_order: Order used when a list query gives none
        text_columns: Columns searched by the text filter
        type_filter_columns: ENUM columns usable as equality filters
        scope_columns: Parent columns usable as parent_id / secondary_parent_id
        parent: Link to the owning parent (None for roots)
        owned: False for entities shared across publishers

    Invariants:
        - Every name listed in key, text_columns, type_filter_columns,
          scope_columns and parent.column is a declared column
        - Every order_fields value is a declared column
        - created_at and updated_at are declared, generated TIMESTAMP columns

    Example:
        >>> entity_def.key_of(work)
        (UUID('...'),)
    """

    name: str
    table: str
    key: tuple[str, ...]
    columns: tuple[ColumnDef, ...]
    entity_cls: type
    new_cls: type
    patch_cls: type
    order_fields: type[Enum]
    default_order: OrderBy
    text_columns: tuple[str, ...] = dataclass_field(default_factory=tuple)
    type_filter_columns: tuple[str, ...] = dataclass_field(default_factory=tuple)
    scope_columns: tuple[str, ...] = dataclass_field(default_factory=tuple)
    parent: ParentLink | None = None
    owned: bool = True
    description: str = ""

    def __post_init__(self) -> None:
        """Validate entity definition."""
        if not self.name:
            raise ValueError("Entity name cannot be empty")
        if not self.key:
            raise ValueError(f"Entity '{self.name}' must declare a key")

        names = [c.name for c in self.columns]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate column name in entity '{self.name}'")
        known = set(names)

        for label, cols in (
            ("key", self.key),
            ("text_columns", self.text_columns),
            ("type_filter_columns", self.type_filter_columns),
            ("scope_columns", self.scope_columns),
        ):
            unknown = [c for c in cols if c not in known]
            if unknown:
                raise ValueError(f"Entity '{self.name}' {label} references unknown columns {unknown}")

        for name in self.type_filter_columns:
            if self.get_column(name).kind != ColumnKind.ENUM:
                raise ValueError(f"Type filter '{name}' on '{self.name}' must be an ENUM column")

        if len(self.scope_columns) > 2:
            raise ValueError(f"Entity '{self.name}' supports at most two scope columns")

        if self.parent is not None and self.parent.column not in known:
            raise ValueError(
                f"Entity '{self.name}' parent column '{self.parent.column}' is not declared"
            )

        for member in self.order_fields:
            if member.value not in known:
                raise ValueError(
                    f"Order field {member.name} of '{self.name}' is not a column: {member.value}"
                )
        if not isinstance(self.default_order.field, self.order_fields):
            raise ValueError(f"Default order of '{self.name}' must use {self.order_fields.__name__}")

        for stamp in ("created_at", "updated_at"):
            if stamp not in known or self.get_column(stamp).kind != ColumnKind.TIMESTAMP:
                raise ValueError(f"Entity '{self.name}' must declare a TIMESTAMP '{stamp}' column")

    def get_column(self, name: str) -> ColumnDef:
        for c in self.columns:
            if c.name == name:
                return c
        raise KeyError(f"Entity '{self.name}' has no column '{name}'")

    @property
    def key_columns(self) -> tuple[ColumnDef, ...]:
        return tuple(self.get_column(name) for name in self.key)

    @property
    def generated_key(self) -> bool:
        """Whether the key is a single server-generated UUID."""
        return len(self.key) == 1 and self.get_column(self.key[0]).generated

    @property
    def new_columns(self) -> tuple[ColumnDef, ...]:
        """Columns supplied by the caller on create."""
        return tuple(c for c in self.columns if not c.generated)

    @property
    def mutable_columns(self) -> tuple[ColumnDef, ...]:
        """Columns replaced by an update."""
        return tuple(c for c in self.new_columns if c.name not in self.key)

    @property
    def history_table(self) -> str:
        return f"{self.table}_history"

    @property
    def history_id_column(self) -> str:
        return f"{self.table}_history_id"

    def normalize_key(self, key: Any) -> tuple:
        """Accept a bare value for single-column keys, a tuple otherwise."""
        values = key if isinstance(key, tuple) else (key,)
        if len(values) != len(self.key):
            raise ValueError(
                f"Entity '{self.name}' key needs {len(self.key)} value(s), got {len(values)}"
            )
        return values

    def key_of(self, obj: Any) -> tuple:
        """Extract key values from an entity or patch instance."""
        return tuple(getattr(obj, name) for name in self.key)

    def from_row(self, row: Any) -> Any:
        """Build an entity instance from a sqlite3.Row."""
        return self.entity_cls(**{c.name: c.from_db(row[c.name]) for c in self.columns})

    def to_snapshot(self, entity: Any) -> dict[str, Any]:
        """JSON-compatible serialization of a full entity."""
        return {c.name: c.to_json(getattr(entity, c.name)) for c in self.columns}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation (used for fingerprinting)."""
        result: dict[str, Any] = {
            "name": self.name,
            "table": self.table,
            "key": list(self.key),
            "columns": [c.to_dict() for c in self.columns],
            "order_fields": [m.value for m in self.order_fields],
        }
        if self.text_columns:
            result["text_columns"] = list(self.text_columns)
        if self.type_filter_columns:
            result["type_filter_columns"] = list(self.type_filter_columns)
        if self.scope_columns:
            result["scope_columns"] = list(self.scope_columns)
        if self.parent is not None:
            result["parent"] = {"column": self.parent.column, "entity": self.parent.entity}
        if not self.owned:
            result["owned"] = False
        return result

    def __hash__(self) -> int:
        return hash(self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityDef):
            return NotImplemented
        return self.name == other.name
