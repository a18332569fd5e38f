"""
SQLite schema for the catalogue.

Table layout:
    One table per entity (see schema/entities.py for columns) plus one
    <table>_history table each:
        - <table>_history_id TEXT (UUID) PRIMARY KEY
        - key column(s) of the entity
        - account_id TEXT (UUID)
        - data TEXT (JSON snapshot of the row before the update)
        - timestamp TEXT (ISO 8601 UTC)

Storage conventions:
    - UUIDs are TEXT, booleans INTEGER 0/1, dates and timestamps ISO TEXT
    - Children cascade on parent deletion
    - History tables have no foreign key: they are append-only and keep
      the pre-images of deleted entities

Constraint naming:
    SQLite names CHECK constraints and expression indexes in its error
    messages but reports plain UNIQUE violations by column list.
    UNIQUE_CONSTRAINTS maps (table, columns) back to a constraint name so
    every violation can be looked up in the message table.

How to change safely:
    - Only add tables, columns (nullable or with a default) and indexes
    - Add a UNIQUE_CONSTRAINTS entry for every new unique column set
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..schema.entities import ALL_ENTITIES
from ..schema.types import EntityDef

SCHEMA_VERSION = 1

TABLES_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS publisher (
    publisher_id TEXT PRIMARY KEY,
    publisher_name TEXT NOT NULL CONSTRAINT publisher_publisher_name_check
        CHECK (length(publisher_name) >= 1),
    publisher_shortname TEXT,
    publisher_url TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS imprint (
    imprint_id TEXT PRIMARY KEY,
    publisher_id TEXT NOT NULL REFERENCES publisher(publisher_id) ON DELETE CASCADE,
    imprint_name TEXT NOT NULL CONSTRAINT imprint_imprint_name_check
        CHECK (length(imprint_name) >= 1),
    imprint_url TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS imprint_publisher_id_idx ON imprint(publisher_id);

CREATE TABLE IF NOT EXISTS work (
    work_id TEXT PRIMARY KEY,
    work_type TEXT NOT NULL,
    work_status TEXT NOT NULL,
    full_title TEXT NOT NULL CONSTRAINT work_full_title_check
        CHECK (length(full_title) >= 1),
    title TEXT NOT NULL CONSTRAINT work_title_check CHECK (length(title) >= 1),
    subtitle TEXT,
    reference TEXT,
    edition INTEGER CONSTRAINT work_edition_check CHECK (edition > 0),
    imprint_id TEXT NOT NULL REFERENCES imprint(imprint_id) ON DELETE CASCADE,
    doi TEXT,
    publication_date TEXT,
    place TEXT,
    width INTEGER CONSTRAINT work_width_check CHECK (width > 0),
    height INTEGER CONSTRAINT work_height_check CHECK (height > 0),
    page_count INTEGER CONSTRAINT work_page_count_check CHECK (page_count > 0),
    page_breakdown TEXT,
    image_count INTEGER CONSTRAINT work_image_count_check CHECK (image_count >= 0),
    table_count INTEGER CONSTRAINT work_table_count_check CHECK (table_count >= 0),
    audio_count INTEGER CONSTRAINT work_audio_count_check CHECK (audio_count >= 0),
    video_count INTEGER CONSTRAINT work_video_count_check CHECK (video_count >= 0),
    license TEXT,
    copyright_holder TEXT NOT NULL,
    landing_page TEXT,
    lccn TEXT,
    oclc TEXT,
    short_abstract TEXT,
    long_abstract TEXT,
    general_note TEXT,
    toc TEXT,
    cover_url TEXT,
    cover_caption TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS work_imprint_id_idx ON work(imprint_id);
CREATE UNIQUE INDEX IF NOT EXISTS work_doi_uniq_idx ON work(lower(doi));

CREATE TABLE IF NOT EXISTS publication (
    publication_id TEXT PRIMARY KEY,
    publication_type TEXT NOT NULL,
    work_id TEXT NOT NULL REFERENCES work(work_id) ON DELETE CASCADE,
    isbn TEXT,
    publication_url TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    CONSTRAINT publication_publication_type_work_id_uniq UNIQUE (publication_type, work_id)
);
CREATE INDEX IF NOT EXISTS publication_work_id_idx ON publication(work_id);

CREATE TABLE IF NOT EXISTS contributor (
    contributor_id TEXT PRIMARY KEY,
    first_name TEXT,
    last_name TEXT NOT NULL CONSTRAINT contributor_last_name_check
        CHECK (length(last_name) >= 1),
    full_name TEXT NOT NULL CONSTRAINT contributor_full_name_check
        CHECK (length(full_name) >= 1),
    orcid TEXT,
    website TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS contribution (
    work_id TEXT NOT NULL REFERENCES work(work_id) ON DELETE CASCADE,
    contributor_id TEXT NOT NULL REFERENCES contributor(contributor_id) ON DELETE CASCADE,
    contribution_type TEXT NOT NULL,
    main_contribution INTEGER NOT NULL DEFAULT 0,
    biography TEXT,
    institution TEXT,
    first_name TEXT,
    last_name TEXT NOT NULL,
    full_name TEXT NOT NULL,
    contribution_ordinal INTEGER NOT NULL CONSTRAINT contribution_contribution_ordinal_check
        CHECK (contribution_ordinal > 0),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    CONSTRAINT contribution_work_id_contributor_id_contribution_type_uniq
        PRIMARY KEY (work_id, contributor_id, contribution_type),
    CONSTRAINT contribution_contribution_ordinal_work_id_uniq
        UNIQUE (contribution_ordinal, work_id)
);
CREATE INDEX IF NOT EXISTS contribution_contributor_id_idx ON contribution(contributor_id);

CREATE TABLE IF NOT EXISTS series (
    series_id TEXT PRIMARY KEY,
    series_type TEXT NOT NULL,
    series_name TEXT NOT NULL CONSTRAINT series_series_name_check
        CHECK (length(series_name) >= 1),
    issn_print TEXT NOT NULL,
    issn_digital TEXT NOT NULL,
    series_url TEXT,
    imprint_id TEXT NOT NULL REFERENCES imprint(imprint_id) ON DELETE CASCADE,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS series_imprint_id_idx ON series(imprint_id);

CREATE TABLE IF NOT EXISTS issue (
    series_id TEXT NOT NULL REFERENCES series(series_id) ON DELETE CASCADE,
    work_id TEXT NOT NULL REFERENCES work(work_id) ON DELETE CASCADE,
    issue_ordinal INTEGER NOT NULL CONSTRAINT issue_issue_ordinal_check
        CHECK (issue_ordinal > 0),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    CONSTRAINT issue_series_id_work_id_uniq PRIMARY KEY (series_id, work_id)
);
CREATE INDEX IF NOT EXISTS issue_work_id_idx ON issue(work_id);

CREATE TABLE IF NOT EXISTS language (
    language_id TEXT PRIMARY KEY,
    work_id TEXT NOT NULL REFERENCES work(work_id) ON DELETE CASCADE,
    language_code TEXT NOT NULL,
    language_relation TEXT NOT NULL,
    main_language INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS language_work_id_idx ON language(work_id);

CREATE TABLE IF NOT EXISTS price (
    price_id TEXT PRIMARY KEY,
    publication_id TEXT NOT NULL REFERENCES publication(publication_id) ON DELETE CASCADE,
    currency_code TEXT NOT NULL,
    unit_price REAL NOT NULL CONSTRAINT price_unit_price_check CHECK (unit_price > 0),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS price_publication_id_idx ON price(publication_id);

CREATE TABLE IF NOT EXISTS subject (
    subject_id TEXT PRIMARY KEY,
    work_id TEXT NOT NULL REFERENCES work(work_id) ON DELETE CASCADE,
    subject_type TEXT NOT NULL,
    subject_code TEXT NOT NULL,
    subject_ordinal INTEGER NOT NULL CONSTRAINT subject_subject_ordinal_check
        CHECK (subject_ordinal > 0),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS subject_work_id_idx ON subject(work_id);

CREATE TABLE IF NOT EXISTS funder (
    funder_id TEXT PRIMARY KEY,
    funder_name TEXT NOT NULL CONSTRAINT funder_funder_name_check
        CHECK (length(funder_name) >= 1),
    funder_doi TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS funding (
    funding_id TEXT PRIMARY KEY,
    work_id TEXT NOT NULL REFERENCES work(work_id) ON DELETE CASCADE,
    funder_id TEXT NOT NULL REFERENCES funder(funder_id) ON DELETE CASCADE,
    program TEXT,
    project_name TEXT,
    project_shortname TEXT,
    grant_number TEXT,
    jurisdiction TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS funding_work_id_idx ON funding(work_id);
CREATE INDEX IF NOT EXISTS funding_funder_id_idx ON funding(funder_id);

CREATE TABLE IF NOT EXISTS location (
    location_id TEXT PRIMARY KEY,
    publication_id TEXT NOT NULL REFERENCES publication(publication_id) ON DELETE CASCADE,
    landing_page TEXT,
    full_text_url TEXT,
    location_platform TEXT NOT NULL,
    canonical INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    CONSTRAINT location_url_check
        CHECK (landing_page IS NOT NULL OR full_text_url IS NOT NULL)
);
CREATE INDEX IF NOT EXISTS location_publication_id_idx ON location(publication_id);
CREATE UNIQUE INDEX IF NOT EXISTS location_uniq_canonical_true_idx
    ON location(publication_id) WHERE canonical = 1;
"""

UNIQUE_CONSTRAINTS: Mapping[tuple[str, frozenset[str]], str] = MappingProxyType({
    ("contribution", frozenset({"work_id", "contributor_id", "contribution_type"})):
        "contribution_work_id_contributor_id_contribution_type_uniq",
    ("contribution", frozenset({"contribution_ordinal", "work_id"})):
        "contribution_contribution_ordinal_work_id_uniq",
    ("issue", frozenset({"series_id", "work_id"})): "issue_series_id_work_id_uniq",
    ("publication", frozenset({"publication_type", "work_id"})):
        "publication_publication_type_work_id_uniq",
    ("location", frozenset({"publication_id"})): "location_uniq_canonical_true_idx",
})


def history_table_sql(entity_def: EntityDef) -> str:
    """CREATE statements for the history table of one entity."""
    key_defs = ",\n    ".join(f"{name} TEXT NOT NULL" for name in entity_def.key)
    key_list = ", ".join(entity_def.key)
    return f"""
CREATE TABLE IF NOT EXISTS {entity_def.history_table} (
    {entity_def.history_id_column} TEXT PRIMARY KEY,
    {key_defs},
    account_id TEXT NOT NULL,
    data TEXT NOT NULL,
    timestamp TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS {entity_def.history_table}_key_idx
    ON {entity_def.history_table}({key_list}, timestamp);
"""


def schema_sql(entities: tuple[EntityDef, ...] = ALL_ENTITIES) -> str:
    """Full schema script, safe to run on an existing database."""
    history = "".join(history_table_sql(entity_def) for entity_def in entities)
    return TABLES_SQL + history + (
        "\nINSERT OR IGNORE INTO schema_version (version, applied_at)"
        f"\nVALUES ({SCHEMA_VERSION}, strftime('%Y-%m-%dT%H:%M:%f+00:00', 'now'));\n"
    )
