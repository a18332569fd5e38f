"""
Unit tests for storage error translation.

Tests cover:
- Constraint name extraction from SQLite messages
- Mapping to DatabaseConstraintError / DatabaseError / InternalError
- Real violations raised by the catalogue schema
"""

import sqlite3
import uuid

import pytest

from catalogue.catalogue_server.errors import (
    DatabaseConstraintError,
    DatabaseError,
    InternalError,
)
from catalogue.catalogue_server.store.constraints import (
    DATABASE_CONSTRAINT_ERRORS,
    constraint_name,
    translate_error,
)
from catalogue.catalogue_server.store.ddl import schema_sql

NOW = "2024-01-01T00:00:00.000000+00:00"


class TestConstraintName:
    """Tests for constraint_name."""

    def test_unique_columns_mapped_to_name(self):
        message = "UNIQUE constraint failed: contribution.contribution_ordinal, contribution.work_id"
        assert constraint_name(message) == "contribution_contribution_ordinal_work_id_uniq"

    def test_unique_columns_any_order(self):
        message = "UNIQUE constraint failed: publication.work_id, publication.publication_type"
        assert constraint_name(message) == "publication_publication_type_work_id_uniq"

    def test_unique_index_name(self):
        assert constraint_name("UNIQUE constraint failed: index 'work_doi_uniq_idx'") == "work_doi_uniq_idx"

    def test_check_name(self):
        assert constraint_name("CHECK constraint failed: location_url_check") == "location_url_check"

    def test_undeclared_unique_columns(self):
        assert constraint_name("UNIQUE constraint failed: work.work_id") is None

    def test_not_null_has_no_name(self):
        assert constraint_name("NOT NULL constraint failed: work.title") is None


class TestTranslateError:
    """Tests for translate_error."""

    def test_mapped_constraint(self):
        error = sqlite3.IntegrityError(
            "UNIQUE constraint failed: issue.series_id, issue.work_id"
        )
        translated = translate_error(error, "issue")

        assert isinstance(translated, DatabaseConstraintError)
        assert str(translated) == "An issue on the selected series already exists for the this work."
        assert translated.constraint == "issue_series_id_work_id_uniq"

    def test_unmapped_violation(self):
        error = sqlite3.IntegrityError("FOREIGN KEY constraint failed")
        translated = translate_error(error, "work")

        assert isinstance(translated, DatabaseError)
        assert "FOREIGN KEY" not in str(translated)
        assert translated.details["raw"] == "FOREIGN KEY constraint failed"

    def test_other_errors_are_internal(self):
        translated = translate_error(sqlite3.OperationalError("disk I/O error"), "work")

        assert isinstance(translated, InternalError)
        assert str(translated) == "Internal error"

    def test_message_table_is_read_only(self):
        with pytest.raises(TypeError):
            DATABASE_CONSTRAINT_ERRORS["x"] = "y"


class TestSchemaViolations:
    """Violations raised by the real schema map to the expected errors."""

    @pytest.fixture
    def conn(self):
        conn = sqlite3.connect(":memory:", isolation_level=None)
        conn.execute("PRAGMA foreign_keys = ON")
        conn.executescript(schema_sql())
        yield conn
        conn.close()

    @pytest.fixture
    def work_id(self, conn):
        publisher_id, imprint_id, work_id = (str(uuid.uuid4()) for _ in range(3))
        conn.execute(
            "INSERT INTO publisher (publisher_id, publisher_name, created_at, updated_at) VALUES (?, ?, ?, ?)",
            (publisher_id, "Punctum Books", NOW, NOW),
        )
        conn.execute(
            "INSERT INTO imprint (imprint_id, publisher_id, imprint_name, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (imprint_id, publisher_id, "Punctum", NOW, NOW),
        )
        conn.execute(
            "INSERT INTO work (work_id, work_type, work_status, full_title, title, edition, imprint_id, "
            "copyright_holder, doi, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (work_id, "monograph", "active", "Title", "Title", 1, imprint_id, "Author",
             "https://doi.org/10.1/X", NOW, NOW),
        )
        return work_id

    def _insert_publication(self, conn, work_id):
        conn.execute(
            "INSERT INTO publication (publication_id, publication_type, work_id, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (str(uuid.uuid4()), "PDF", work_id, NOW, NOW),
        )

    def test_duplicate_publication_type(self, conn, work_id):
        self._insert_publication(conn, work_id)
        with pytest.raises(sqlite3.IntegrityError) as exc_info:
            self._insert_publication(conn, work_id)

        translated = translate_error(exc_info.value)
        assert isinstance(translated, DatabaseConstraintError)
        assert str(translated) == "A publication with the selected type already exists."

    def test_location_without_url(self, conn, work_id):
        self._insert_publication(conn, work_id)
        publication_id = conn.execute("SELECT publication_id FROM publication").fetchone()[0]
        with pytest.raises(sqlite3.IntegrityError) as exc_info:
            conn.execute(
                "INSERT INTO location (location_id, publication_id, location_platform, canonical, "
                "created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?)",
                (str(uuid.uuid4()), publication_id, "Other", 1, NOW, NOW),
            )

        translated = translate_error(exc_info.value)
        assert translated.constraint == "location_url_check"

    def test_duplicate_doi_is_unmapped(self, conn, work_id):
        with pytest.raises(sqlite3.IntegrityError) as exc_info:
            conn.execute(
                "INSERT INTO work (work_id, work_type, work_status, full_title, title, edition, "
                "imprint_id, copyright_holder, doi, created_at, updated_at) "
                "SELECT ?, work_type, work_status, full_title, title, edition, imprint_id, "
                "copyright_holder, upper(doi), created_at, updated_at FROM work WHERE work_id = ?",
                (str(uuid.uuid4()), work_id),
            )

        assert constraint_name(str(exc_info.value)) == "work_doi_uniq_idx"
        assert isinstance(translate_error(exc_info.value), DatabaseError)
