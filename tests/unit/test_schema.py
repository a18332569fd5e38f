"""
Unit tests for schema types.

Tests cover:
- Column value conversion to and from SQLite
- EntityDef validation
- Key handling for single and composite keys
- Snapshot serialization
"""

import dataclasses
import uuid
from datetime import date, datetime, timezone

import pytest

from catalogue.catalogue_server.schema import CONTRIBUTION, ISSUE, PUBLISHER, WORK, column
from catalogue.catalogue_server.schema.enums import ContributionType, PublicationType, WorkType
from catalogue.catalogue_server.schema.models import Publisher, PublisherField
from catalogue.catalogue_server.schema.types import (
    ColumnKind,
    Direction,
    OrderBy,
    format_timestamp,
)


class TestColumnDef:
    """Tests for ColumnDef conversions."""

    def test_uuid_roundtrip(self):
        """UUIDs are stored as canonical text."""
        col = column("work_id", "uuid")
        value = uuid.uuid4()
        assert col.to_db(value) == str(value)
        assert col.from_db(str(value)) == value

    def test_bool_stored_as_integer(self):
        col = column("canonical", "bool")
        assert col.to_db(True) == 1
        assert col.to_db(False) == 0
        assert col.from_db(1) is True
        assert col.from_db(0) is False

    def test_enum_stored_by_value(self):
        col = column("work_type", "enum", enum_type=WorkType)
        assert col.to_db(WorkType.BOOK_CHAPTER) == "book-chapter"
        assert col.to_db("monograph") == "monograph"
        assert col.from_db("edited-book") == WorkType.EDITED_BOOK

    def test_enum_rejects_unknown_value(self):
        col = column("work_type", "enum", enum_type=WorkType)
        with pytest.raises(ValueError):
            col.to_db("pamphlet")

    def test_date_roundtrip(self):
        col = column("publication_date", "date", nullable=True)
        assert col.to_db(date(2021, 3, 14)) == "2021-03-14"
        assert col.from_db("2021-03-14") == date(2021, 3, 14)

    def test_none_passes_through(self):
        col = column("doi", "str", nullable=True)
        assert col.to_db(None) is None
        assert col.from_db(None) is None

    def test_timestamp_fixed_width_utc(self):
        """Timestamps are UTC with microseconds so text order is time order."""
        value = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2024-01-02T03:04:05.000000+00:00"

        col = column("created_at", "timestamp", generated=True)
        assert col.from_db(col.to_db(value)) == value

    def test_json_keeps_numbers_and_booleans(self):
        assert column("canonical", "bool").to_json(True) is True
        assert column("unit_price", "float").to_json(9.99) == 9.99
        assert column("publication_type", "enum", enum_type=PublicationType).to_json(
            PublicationType.PDF
        ) == "PDF"

    def test_enum_column_requires_enum_type(self):
        with pytest.raises(ValueError, match="enum_type required"):
            column("work_type", "enum")

    def test_invalid_kind(self):
        with pytest.raises(ValueError, match="Invalid column kind"):
            ColumnKind.from_str("decimal")


class TestEntityDef:
    """Tests for EntityDef validation and helpers."""

    def test_unknown_text_column_rejected(self):
        with pytest.raises(ValueError, match="text_columns references unknown"):
            dataclasses.replace(PUBLISHER, text_columns=("publisher_motto",))

    def test_type_filter_must_be_enum(self):
        with pytest.raises(ValueError, match="must be an ENUM column"):
            dataclasses.replace(WORK, type_filter_columns=("full_title",))

    def test_default_order_uses_own_fields(self):
        with pytest.raises(ValueError, match="Default order"):
            dataclasses.replace(WORK, default_order=OrderBy(PublisherField.PUBLISHER_NAME))

    def test_at_most_two_scope_columns(self):
        with pytest.raises(ValueError, match="at most two scope columns"):
            dataclasses.replace(
                CONTRIBUTION, scope_columns=("work_id", "contributor_id", "contribution_type")
            )

    def test_generated_key(self):
        assert WORK.generated_key is True
        assert CONTRIBUTION.generated_key is False
        assert ISSUE.generated_key is False

    def test_mutable_columns_exclude_key_and_timestamps(self):
        names = [c.name for c in CONTRIBUTION.mutable_columns]
        assert "work_id" not in names
        assert "contribution_type" not in names
        assert "created_at" not in names
        assert "updated_at" not in names
        assert "contribution_ordinal" in names

    def test_normalize_key(self):
        work_id = uuid.uuid4()
        assert WORK.normalize_key(work_id) == (work_id,)
        assert WORK.normalize_key((work_id,)) == (work_id,)

        composite = (uuid.uuid4(), uuid.uuid4(), ContributionType.EDITOR)
        assert CONTRIBUTION.normalize_key(composite) == composite

    def test_normalize_key_wrong_arity(self):
        with pytest.raises(ValueError, match="needs 2 value"):
            ISSUE.normalize_key(uuid.uuid4())

    def test_history_names(self):
        assert WORK.history_table == "work_history"
        assert WORK.history_id_column == "work_history_id"

    def test_snapshot(self):
        now = datetime(2024, 5, 1, tzinfo=timezone.utc)
        publisher = Publisher(
            publisher_id=uuid.UUID("11111111-1111-4111-8111-111111111111"),
            publisher_name="Open Book Publishers",
            publisher_shortname="OBP",
            publisher_url=None,
            created_at=now,
            updated_at=now,
        )
        snapshot = PUBLISHER.to_snapshot(publisher)
        assert snapshot == {
            "publisher_id": "11111111-1111-4111-8111-111111111111",
            "publisher_name": "Open Book Publishers",
            "publisher_shortname": "OBP",
            "publisher_url": None,
            "created_at": "2024-05-01T00:00:00.000000+00:00",
            "updated_at": "2024-05-01T00:00:00.000000+00:00",
        }

    def test_order_by_defaults_ascending(self):
        assert OrderBy(PublisherField.PUBLISHER_NAME).direction == Direction.ASC
