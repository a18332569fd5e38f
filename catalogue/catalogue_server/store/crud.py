"""
Generic CRUD engine for catalogue entities.

EntityCrud implements list, count, get, create, update, delete and
history once, driven by an EntityDef. Per-entity subclasses only add
domain pre-conditions (validate_new / validate_patch / validate_delete)
and entity-specific lookups.

Write paths:
    create: authorize -> validate -> INSERT (autocommit)
    update: BEGIN IMMEDIATE -> load current row -> authorize old and new
            owner -> validate -> UPDATE -> history row -> COMMIT
    delete: load current row -> authorize -> validate -> DELETE (autocommit)

Invariants:
    - Authorization and domain checks run before any write
    - An update and its history row commit or roll back together
    - There is no version column: concurrent updates are last-writer-wins,
      the history keeps every pre-image
    - sqlite3 errors never escape; they are translated to CatalogueError

How to change safely:
    - Put entity rules in validate_* hooks, never in the generic paths
    - Never await while a connection is checked out
"""

from __future__ import annotations

import logging
import re
import sqlite3
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, ClassVar, Generic, Optional, TypeVar

from ..access.acl import AccountAccess, AuthorizationGate
from ..access.ownership import OwnershipResolver
from ..errors import (
    CanonicalLocationError,
    ChapterBookMetadataError,
    EditionRequiredError,
    EntityNotFound,
    InvalidSubjectCode,
    IssueImprintsError,
    LocationUrlError,
)
from ..query.builder import ListQuery, QueryBuilder
from ..schema.enums import PublicationType, SubjectType, WorkType
from ..schema.models import (
    Contribution,
    Contributor,
    Funder,
    Funding,
    Imprint,
    Issue,
    Language,
    Location,
    NewContribution,
    NewContributor,
    NewFunder,
    NewFunding,
    NewImprint,
    NewIssue,
    NewLanguage,
    NewLocation,
    NewPrice,
    NewPublication,
    NewPublisher,
    NewSeries,
    NewSubject,
    NewWork,
    PatchContribution,
    PatchContributor,
    PatchFunder,
    PatchFunding,
    PatchImprint,
    PatchIssue,
    PatchLanguage,
    PatchLocation,
    PatchPrice,
    PatchPublication,
    PatchPublisher,
    PatchSeries,
    PatchSubject,
    PatchWork,
    Price,
    Publication,
    Publisher,
    Series,
    Subject,
    Work,
)
from ..schema.registry import SchemaRegistry
from ..schema.types import utc_now
from .constraints import translate_error
from .history import AuditLedger, HistoryEntry
from .pool import ConnectionPool

logger = logging.getLogger(__name__)

E = TypeVar("E")
N = TypeVar("N")
P = TypeVar("P")


class EntityCrud(Generic[E, N, P]):
    """CRUD operations for one entity kind.

    Subclasses set `entity_name` and may override the validate_* hooks.

    Example:
        >>> works = WorkCrud(pool, registry, resolver, gate, ledger)
        >>> work = await works.create(access, NewWork(...))
        >>> page = await works.all(ListQuery(limit=20, filter="water"))
    """

    entity_name: ClassVar[str]
    default_page_size: int = 100

    def __init__(
        self,
        pool: ConnectionPool,
        registry: SchemaRegistry,
        resolver: OwnershipResolver,
        gate: AuthorizationGate,
        ledger: AuditLedger,
    ) -> None:
        self.pool = pool
        self.entity_def = registry.require(self.entity_name)
        self.resolver = resolver
        self.gate = gate
        self.ledger = ledger
        self.builder = QueryBuilder(self.entity_def, resolver.chain(self.entity_name))

    @contextmanager
    def _storage(self, transaction: bool = False) -> Iterator[sqlite3.Connection]:
        try:
            with (self.pool.transaction() if transaction else self.pool.connection()) as conn:
                yield conn
        except sqlite3.Error as e:
            raise translate_error(e, self.entity_name) from e

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def all(self, query: Optional[ListQuery] = None) -> list[E]:
        """One page of entities matching the query."""
        compiled = self.builder.select(query or ListQuery(limit=self.default_page_size))
        with self._storage() as conn:
            rows = conn.execute(compiled.sql, compiled.params).fetchall()
        return [self.entity_def.from_row(row) for row in rows]

    async def count(self, query: Optional[ListQuery] = None) -> int:
        """Number of entities matching the query, ignoring pagination."""
        compiled = self.builder.count(query or ListQuery())
        with self._storage() as conn:
            return conn.execute(compiled.sql, compiled.params).fetchone()[0]

    async def get(self, key: Any) -> E:
        """Fetch by key (bare value, or tuple for composite keys).

        Raises:
            EntityNotFound: If no row has this key
        """
        with self._storage() as conn:
            return self._fetch(conn, key)

    async def history(self, key: Any) -> list[HistoryEntry]:
        """Recorded pre-images of an entity, oldest first."""
        with self._storage() as conn:
            return self.ledger.entries(conn, self.entity_def, key)

    def _key_clause(self, key: Any) -> tuple[str, tuple]:
        entity_def = self.entity_def
        values = entity_def.normalize_key(key)
        where = " AND ".join(f"{name} = ?" for name in entity_def.key)
        params = tuple(col.to_db(v) for col, v in zip(entity_def.key_columns, values))
        return where, params

    def _fetch(self, conn: sqlite3.Connection, key: Any) -> E:
        where, params = self._key_clause(key)
        row = conn.execute(
            f"SELECT * FROM {self.entity_def.table} WHERE {where}", params
        ).fetchone()
        if row is None:
            raise EntityNotFound(self.entity_name, key)
        return self.entity_def.from_row(row)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(self, access: AccountAccess, new: N) -> E:
        """Insert a new entity and return the stored row.

        Raises:
            Unauthorised: If the account may not create under this owner
            CatalogueError: Domain or constraint violation
        """
        entity_def = self.entity_def
        now = utc_now()
        values: dict[str, Any] = {c.name: getattr(new, c.name) for c in entity_def.new_columns}
        if entity_def.generated_key:
            values[entity_def.key[0]] = uuid.uuid4()
        values["created_at"] = now
        values["updated_at"] = now

        columns = [c for c in entity_def.columns if c.name in values]
        sql = (
            f"INSERT INTO {entity_def.table} ({', '.join(c.name for c in columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})"
        )
        key = tuple(values[name] for name in entity_def.key)

        with self._storage() as conn:
            self.authorize_create(conn, access, new)
            self.validate_new(conn, new)
            conn.execute(sql, tuple(c.to_db(values[c.name]) for c in columns))
            created = self._fetch(conn, key)

        self._log_mutation("Created", key, access)
        return created

    async def update(self, access: AccountAccess, patch: P) -> E:
        """Replace the mutable fields of an existing entity.

        The pre-image is written to the history table in the same
        transaction.

        Raises:
            EntityNotFound: If no row has the patch's key
            Unauthorised: If the account may not edit the old or new owner
            CatalogueError: Domain or constraint violation
        """
        entity_def = self.entity_def
        key = entity_def.key_of(patch)
        mutable = entity_def.mutable_columns
        where, key_params = self._key_clause(key)
        assignments = ", ".join(f"{c.name} = ?" for c in mutable)
        sql = f"UPDATE {entity_def.table} SET {assignments}, updated_at = ? WHERE {where}"
        updated_at = entity_def.get_column("updated_at")

        with self._storage(transaction=True) as conn:
            current = self._fetch(conn, key)
            self.authorize_update(conn, access, current, patch)
            self.validate_patch(conn, current, patch)
            conn.execute(
                sql,
                (
                    *(c.to_db(getattr(patch, c.name)) for c in mutable),
                    updated_at.to_db(utc_now()),
                    *key_params,
                ),
            )
            self.ledger.record(conn, entity_def, current, access.account_id)
            updated = self._fetch(conn, key)

        self._log_mutation("Updated", key, access)
        return updated

    async def delete(self, access: AccountAccess, key: Any) -> E:
        """Delete an entity and return it as it was.

        Raises:
            EntityNotFound: If no row has this key
            Unauthorised: If the account may not edit the owner
        """
        where, params = self._key_clause(key)
        with self._storage() as conn:
            current = self._fetch(conn, key)
            self.authorize_delete(conn, access, current)
            self.validate_delete(conn, current)
            conn.execute(f"DELETE FROM {self.entity_def.table} WHERE {where}", params)

        self._log_mutation("Deleted", self.entity_def.key_of(current), access)
        return current

    def _log_mutation(self, verb: str, key: tuple, access: AccountAccess) -> None:
        """Log a completed write; `key` is the tuple of key values."""
        logger.info(
            f"{verb} {self.entity_name}",
            extra={
                "entity": self.entity_name,
                "key": ",".join(str(getattr(v, "value", v)) for v in key),
                "account_id": str(access.account_id),
            },
        )

    # ------------------------------------------------------------------
    # Authorization
    # ------------------------------------------------------------------

    def _authorize(self, conn: sqlite3.Connection, access: Optional[AccountAccess], *objs: Any) -> None:
        access = self.gate.require_authenticated(access)
        if not self.entity_def.owned or access.is_superuser:
            return
        owners = {self.resolver.owner_of(conn, self.entity_def, obj) for obj in objs}
        self.gate.require_publishers(access, owners, entity=self.entity_name)

    def authorize_create(self, conn: sqlite3.Connection, access: AccountAccess, new: N) -> None:
        self._authorize(conn, access, new)

    def authorize_update(self, conn: sqlite3.Connection, access: AccountAccess, current: E, patch: P) -> None:
        # A move is authorized against both the current and the new owner.
        self._authorize(conn, access, current, patch)

    def authorize_delete(self, conn: sqlite3.Connection, access: AccountAccess, current: E) -> None:
        self._authorize(conn, access, current)

    # ------------------------------------------------------------------
    # Domain hooks
    # ------------------------------------------------------------------

    def validate_new(self, conn: sqlite3.Connection, new: N) -> None:
        pass

    def validate_patch(self, conn: sqlite3.Connection, current: E, patch: P) -> None:
        pass

    def validate_delete(self, conn: sqlite3.Connection, current: E) -> None:
        pass


def _count(conn: sqlite3.Connection, sql: str, params: tuple) -> int:
    return conn.execute(sql, params).fetchone()[0]


# ----------------------------------------------------------------------
# Entity engines
# ----------------------------------------------------------------------


class PublisherCrud(EntityCrud[Publisher, NewPublisher, PatchPublisher]):
    entity_name = "publisher"

    def authorize_create(self, conn: sqlite3.Connection, access: AccountAccess, new: NewPublisher) -> None:
        self.gate.require_superuser(access, action="create publisher")


class ImprintCrud(EntityCrud[Imprint, NewImprint, PatchImprint]):
    entity_name = "imprint"


CHAPTER_RESTRICTED_FIELDS = ("edition", "width", "height", "toc", "lccn", "oclc")


def check_work_fields(work: Any) -> None:
    """Enforce the metadata rules that depend on the work type.

    Raises:
        ChapterBookMetadataError: A chapter carries book-level metadata
        EditionRequiredError: A non-chapter has no edition
    """
    if work.work_type == WorkType.BOOK_CHAPTER:
        present = [name for name in CHAPTER_RESTRICTED_FIELDS if getattr(work, name) is not None]
        if present:
            raise ChapterBookMetadataError(present)
    elif work.edition is None:
        raise EditionRequiredError()


class WorkCrud(EntityCrud[Work, NewWork, PatchWork]):
    entity_name = "work"

    async def get_by_doi(self, doi: str) -> Work:
        """Fetch a work by DOI, ignoring case.

        Raises:
            EntityNotFound: If no work has this DOI
        """
        with self._storage() as conn:
            row = conn.execute(
                "SELECT * FROM work WHERE lower(doi) = lower(?)", (doi,)
            ).fetchone()
        if row is None:
            raise EntityNotFound(self.entity_name, doi)
        return self.entity_def.from_row(row)

    def validate_new(self, conn: sqlite3.Connection, new: NewWork) -> None:
        check_work_fields(new)

    def validate_patch(self, conn: sqlite3.Connection, current: Work, patch: PatchWork) -> None:
        check_work_fields(patch)
        if patch.imprint_id != current.imprint_id:
            self.can_update_imprint(conn, current.work_id)

    def can_update_imprint(self, conn: sqlite3.Connection, work_id: uuid.UUID) -> None:
        """A work's imprint is fixed once the work is an issue of a series."""
        issues = _count(conn, "SELECT COUNT(*) FROM issue WHERE work_id = ?", (str(work_id),))
        if issues > 0:
            raise IssueImprintsError()


class PublicationCrud(EntityCrud[Publication, NewPublication, PatchPublication]):
    entity_name = "publication"


class ContributorCrud(EntityCrud[Contributor, NewContributor, PatchContributor]):
    entity_name = "contributor"


class ContributionCrud(EntityCrud[Contribution, NewContribution, PatchContribution]):
    entity_name = "contribution"


class SeriesCrud(EntityCrud[Series, NewSeries, PatchSeries]):
    entity_name = "series"

    def validate_patch(self, conn: sqlite3.Connection, current: Series, patch: PatchSeries) -> None:
        if patch.imprint_id != current.imprint_id:
            issues = _count(
                conn, "SELECT COUNT(*) FROM issue WHERE series_id = ?", (str(current.series_id),)
            )
            if issues > 0:
                raise IssueImprintsError()


class IssueCrud(EntityCrud[Issue, NewIssue, PatchIssue]):
    entity_name = "issue"

    def issue_imprints_match(self, conn: sqlite3.Connection, series_id: uuid.UUID, work_id: uuid.UUID) -> None:
        """The series and the work of an issue must share an imprint.

        Raises:
            EntityNotFound: If the series or the work does not exist
            IssueImprintsError: If their imprints differ
        """
        series = conn.execute(
            "SELECT imprint_id FROM series WHERE series_id = ?", (str(series_id),)
        ).fetchone()
        if series is None:
            raise EntityNotFound("series", series_id)
        work = conn.execute(
            "SELECT imprint_id FROM work WHERE work_id = ?", (str(work_id),)
        ).fetchone()
        if work is None:
            raise EntityNotFound("work", work_id)
        if series["imprint_id"] != work["imprint_id"]:
            raise IssueImprintsError()

    def validate_new(self, conn: sqlite3.Connection, new: NewIssue) -> None:
        self.issue_imprints_match(conn, new.series_id, new.work_id)

    def validate_patch(self, conn: sqlite3.Connection, current: Issue, patch: PatchIssue) -> None:
        self.issue_imprints_match(conn, patch.series_id, patch.work_id)


class LanguageCrud(EntityCrud[Language, NewLanguage, PatchLanguage]):
    entity_name = "language"


class PriceCrud(EntityCrud[Price, NewPrice, PatchPrice]):
    entity_name = "price"


BISAC_CODE = re.compile(r"^[A-Z]{3}\d{6}$")
THEMA_CODE = re.compile(r"^[A-Z0-9]+$")


def check_subject(subject_type: SubjectType, subject_code: str) -> None:
    """Validate a subject code against the format of its scheme.

    BISAC codes are three capitals and six digits (e.g. HIS000000); Thema
    codes are upper-case alphanumerics (e.g. JBSF11). Other schemes only
    require a non-blank code.

    Raises:
        InvalidSubjectCode: If the code does not match
    """
    valid = bool(subject_code and subject_code.strip())
    if valid and subject_type == SubjectType.BISAC:
        valid = BISAC_CODE.match(subject_code) is not None
    elif valid and subject_type == SubjectType.THEMA:
        valid = THEMA_CODE.match(subject_code) is not None
    if not valid:
        raise InvalidSubjectCode(subject_code, subject_type.value)


class SubjectCrud(EntityCrud[Subject, NewSubject, PatchSubject]):
    entity_name = "subject"

    def validate_new(self, conn: sqlite3.Connection, new: NewSubject) -> None:
        check_subject(new.subject_type, new.subject_code)

    def validate_patch(self, conn: sqlite3.Connection, current: Subject, patch: PatchSubject) -> None:
        check_subject(patch.subject_type, patch.subject_code)


class FunderCrud(EntityCrud[Funder, NewFunder, PatchFunder]):
    entity_name = "funder"


class FundingCrud(EntityCrud[Funding, NewFunding, PatchFunding]):
    entity_name = "funding"


class LocationCrud(EntityCrud[Location, NewLocation, PatchLocation]):
    entity_name = "location"

    def canonical_record_complete(
        self,
        conn: sqlite3.Connection,
        publication_id: uuid.UUID,
        landing_page: Optional[str],
        full_text_url: Optional[str],
    ) -> None:
        """A canonical location of a digital publication needs both URLs.

        Raises:
            EntityNotFound: If the publication does not exist
            LocationUrlError: If a URL is missing for a digital publication
        """
        if landing_page is not None and full_text_url is not None:
            return
        row = conn.execute(
            "SELECT publication_type FROM publication WHERE publication_id = ?",
            (str(publication_id),),
        ).fetchone()
        if row is None:
            raise EntityNotFound("publication", publication_id)
        if PublicationType(row["publication_type"]).is_digital:
            raise LocationUrlError()

    def can_be_non_canonical(self, conn: sqlite3.Connection, publication_id: uuid.UUID) -> None:
        """A non-canonical location needs a canonical sibling.

        Raises:
            CanonicalLocationError: If the publication has no canonical location
        """
        canonical = _count(
            conn,
            "SELECT COUNT(*) FROM location WHERE publication_id = ? AND canonical = 1",
            (str(publication_id),),
        )
        if canonical == 0:
            raise CanonicalLocationError()

    def _require_no_siblings(self, conn: sqlite3.Connection, current: Location) -> None:
        others = _count(
            conn,
            "SELECT COUNT(*) FROM location WHERE publication_id = ? AND location_id != ?",
            (str(current.publication_id), str(current.location_id)),
        )
        if others > 0:
            raise CanonicalLocationError()

    def validate_new(self, conn: sqlite3.Connection, new: NewLocation) -> None:
        if new.canonical:
            self.canonical_record_complete(conn, new.publication_id, new.landing_page, new.full_text_url)
        else:
            self.can_be_non_canonical(conn, new.publication_id)

    def validate_patch(self, conn: sqlite3.Connection, current: Location, patch: PatchLocation) -> None:
        moved = patch.publication_id != current.publication_id
        if current.canonical and not patch.canonical:
            raise CanonicalLocationError()
        if current.canonical and moved:
            self._require_no_siblings(conn, current)

        if patch.canonical:
            self.canonical_record_complete(conn, patch.publication_id, patch.landing_page, patch.full_text_url)
        elif moved:
            self.can_be_non_canonical(conn, patch.publication_id)

    def validate_delete(self, conn: sqlite3.Connection, current: Location) -> None:
        if current.canonical:
            self._require_no_siblings(conn, current)
