"""
Unit tests for schema registry.

Tests cover:
- Entity registration
- Registry freezing
- Fingerprint generation
- Duplicate detection
- Consistency validation
"""

import dataclasses

import pytest

from catalogue.catalogue_server.schema import (
    ALL_ENTITIES,
    IMPRINT,
    PUBLISHER,
    WORK,
    build_registry,
    get_registry,
    reset_registry,
)
from catalogue.catalogue_server.schema.models import NewFunder
from catalogue.catalogue_server.schema.registry import (
    DuplicateRegistrationError,
    RegistryFrozenError,
    SchemaRegistry,
)


class TestSchemaRegistry:
    """Tests for SchemaRegistry."""

    def test_register_entity(self):
        """Can register and look up an entity."""
        registry = SchemaRegistry()
        registry.register(PUBLISHER)

        assert registry.get("publisher") == PUBLISHER
        assert "publisher" in registry
        assert registry.get("work") is None

    def test_require_unknown_raises(self):
        registry = SchemaRegistry()
        with pytest.raises(KeyError, match="Unknown entity"):
            registry.require("monograph")

    def test_duplicate_name_raises(self):
        registry = SchemaRegistry()
        registry.register(PUBLISHER)

        with pytest.raises(DuplicateRegistrationError, match="already registered"):
            registry.register(PUBLISHER)

    def test_duplicate_table_raises(self):
        registry = SchemaRegistry()
        registry.register(PUBLISHER)
        clone = dataclasses.replace(PUBLISHER, name="press")

        with pytest.raises(DuplicateRegistrationError, match="Table 'publisher'"):
            registry.register(clone)

    def test_freeze_prevents_registration(self):
        registry = SchemaRegistry()
        registry.register(PUBLISHER)
        registry.freeze()

        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.register(IMPRINT)

    def test_double_freeze_raises(self):
        registry = SchemaRegistry()
        registry.freeze()
        with pytest.raises(RegistryFrozenError, match="already frozen"):
            registry.freeze()

    def test_fingerprint_deterministic(self):
        """Same declarations give the same fingerprint."""
        fp1 = build_registry().freeze()
        fp2 = build_registry().freeze()

        assert fp1 == fp2
        assert fp1.startswith("sha256:")

    def test_fingerprint_changes_with_schema(self):
        full = build_registry().freeze()

        partial = SchemaRegistry()
        for entity_def in ALL_ENTITIES[:-1]:
            partial.register(entity_def)

        assert partial.freeze() != full


class TestCatalogueRegistry:
    """Tests for the registry holding every catalogue entity."""

    def test_all_entities_registered(self):
        registry = build_registry()
        assert len(registry) == 14
        assert [e.name for e in registry.entities()] == [e.name for e in ALL_ENTITIES]

    def test_declarations_are_consistent(self):
        """Dataclasses, keys and parent links agree with the declarations."""
        assert build_registry().validate_all() == []

    def test_validate_detects_field_mismatch(self):
        registry = SchemaRegistry()
        registry.register(dataclasses.replace(PUBLISHER, new_cls=NewFunder))

        errors = registry.validate_all()
        assert any("NewFunder fields do not match" in e for e in errors)

    def test_validate_detects_unknown_parent(self):
        registry = SchemaRegistry()
        registry.register(WORK)

        errors = registry.validate_all()
        assert any("unknown parent 'imprint'" in e for e in errors)

    def test_ownership_chain(self):
        registry = build_registry()
        chain = registry.ownership_chain("location")
        assert [e.name for e in chain] == ["location", "publication", "work", "imprint", "publisher"]
        assert [e.name for e in registry.ownership_chain("publisher")] == ["publisher"]

    def test_global_registry_frozen(self):
        reset_registry()
        try:
            registry = get_registry()
            assert registry.frozen
            assert registry is get_registry()
        finally:
            reset_registry()
