"""
Schema module for the catalogue.

This module provides the static entity model, including:
- Column and entity definitions (ColumnDef, EntityDef, ParentLink)
- Entity dataclasses with their New/Patch projections and *Field enums
- The schema registry holding every entity

Invariants:
    - Column names equal dataclass field names
    - Key columns never change after creation
    - Enum values are stored verbatim and never renamed
    - All entities are registered before serving

How to change safely:
    - Add a column to the dataclasses, the EntityDef and the DDL together
    - Add enum values, never rename or remove them
    - Run SchemaRegistry.validate_all() after any change
"""

from .entities import (
    ALL_ENTITIES,
    CONTRIBUTION,
    CONTRIBUTOR,
    FUNDER,
    FUNDING,
    IMPRINT,
    ISSUE,
    LANGUAGE,
    LOCATION,
    PRICE,
    PUBLICATION,
    PUBLISHER,
    SERIES,
    SUBJECT,
    WORK,
)
from .registry import (
    DuplicateRegistrationError,
    RegistryFrozenError,
    SchemaRegistry,
    build_registry,
    get_registry,
    reset_registry,
)
from .types import (
    ColumnDef,
    ColumnKind,
    Direction,
    EntityDef,
    OrderBy,
    ParentLink,
    column,
)

__all__ = [
    # Types
    "ColumnDef",
    "ColumnKind",
    "Direction",
    "EntityDef",
    "OrderBy",
    "ParentLink",
    "column",
    # Entities
    "ALL_ENTITIES",
    "PUBLISHER",
    "IMPRINT",
    "WORK",
    "PUBLICATION",
    "CONTRIBUTOR",
    "CONTRIBUTION",
    "SERIES",
    "ISSUE",
    "LANGUAGE",
    "PRICE",
    "SUBJECT",
    "FUNDER",
    "FUNDING",
    "LOCATION",
    # Registry
    "SchemaRegistry",
    "build_registry",
    "get_registry",
    "reset_registry",
    "RegistryFrozenError",
    "DuplicateRegistrationError",
]
