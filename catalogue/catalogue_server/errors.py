"""
Error types for the catalogue data-access core.

Every failure surfaced to callers is one of these:
- CatalogueError: Base exception
- Unauthorised: Caller lacks rights for the mutation
- EntityNotFound: Lookup by key or composite key found nothing
- DatabaseConstraintError: Named constraint violation with a mapped sentence
- DatabaseError: Constraint violation without a mapped sentence
- CanonicalLocationError, LocationUrlError, IssueImprintsError,
  ChapterBookMetadataError, EditionRequiredError, InvalidSubjectCode:
  domain invariant violations detected before the write
- ResourceExhaustedError: No pooled connection became free in time
- InternalError: Unexpected storage failure

Invariants:
    - All errors inherit from CatalogueError
    - str(error) is safe to show to an end user
    - Raw database text never appears in str(error); it may appear in details
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CatalogueError(Exception):
    """Base exception for all catalogue errors.

    Attributes:
        message: User-facing error message
        code: Error code for programmatic handling
        details: Additional error context (not shown to end users)
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "CATALOGUE_ERROR"
        self.details = details or {}


class Unauthorised(CatalogueError):
    """Caller is not allowed to perform this mutation."""

    def __init__(self, message: str = "Unauthorised", publisher_ids: Optional[list] = None) -> None:
        super().__init__(
            message,
            code="UNAUTHORISED",
            details={"publisher_ids": [str(p) for p in publisher_ids or []]},
        )


class EntityNotFound(CatalogueError):
    """Lookup by key found nothing.

    Attributes:
        entity: Entity kind name
        key: The key that was looked up
    """

    def __init__(self, entity: Optional[str] = None, key: Any = None) -> None:
        super().__init__(
            "Could not find entity",
            code="ENTITY_NOT_FOUND",
            details={"entity": entity, "key": str(key) if key is not None else None},
        )
        self.entity = entity
        self.key = key


class DatabaseConstraintError(CatalogueError):
    """A named constraint was violated and has a mapped message."""

    def __init__(self, message: str, constraint: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="DATABASE_CONSTRAINT_ERROR",
            details={"constraint": constraint},
        )
        self.constraint = constraint


class DatabaseError(CatalogueError):
    """A constraint was violated that has no mapped message."""

    def __init__(self, raw_message: Optional[str] = None) -> None:
        super().__init__(
            "Database error: the operation violates a data integrity rule.",
            code="DATABASE_ERROR",
            details={"raw": raw_message},
        )


class InternalError(CatalogueError):
    """Unexpected failure. Never exposes internal detail."""

    def __init__(self) -> None:
        super().__init__("Internal error", code="INTERNAL_ERROR")


class ResourceExhaustedError(CatalogueError):
    """No database connection became available before the pool timeout."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            f"No database connection available after {timeout_seconds:g}s",
            code="RESOURCE_EXHAUSTED",
            details={"timeout_seconds": timeout_seconds},
        )


class CanonicalLocationError(CatalogueError):
    """Non-canonical locations require an existing canonical location."""

    def __init__(self) -> None:
        super().__init__(
            "A publication must have a canonical location before other locations "
            "can be added, and it must stay canonical while they exist.",
            code="CANONICAL_LOCATION_ERROR",
        )


class LocationUrlError(CatalogueError):
    """Canonical location of a digital publication is missing a URL."""

    def __init__(self) -> None:
        super().__init__(
            "A canonical location for a digital publication must have both "
            "a landing page and a full text URL.",
            code="LOCATION_URL_ERROR",
        )


class IssueImprintsError(CatalogueError):
    """An issue's series and work belong to different imprints."""

    def __init__(self) -> None:
        super().__init__(
            "An issue's series and work must both belong to the same imprint.",
            code="ISSUE_IMPRINTS_ERROR",
        )


class ChapterBookMetadataError(CatalogueError):
    """A chapter carries metadata reserved for whole books."""

    def __init__(self, fields: Optional[list[str]] = None) -> None:
        super().__init__(
            "Chapters cannot have the following attributes: "
            "edition, width, height, toc, lccn, oclc.",
            code="CHAPTER_BOOK_METADATA_ERROR",
            details={"fields": fields or []},
        )


class EditionRequiredError(CatalogueError):
    """A non-chapter work is missing its edition number."""

    def __init__(self) -> None:
        super().__init__(
            "An edition number is required for works that are not chapters.",
            code="EDITION_REQUIRED_ERROR",
        )


class InvalidSubjectCode(CatalogueError):
    """Subject code does not match the format of its subject type."""

    def __init__(self, subject_code: str, subject_type: str) -> None:
        super().__init__(
            f"'{subject_code}' is not a valid {subject_type} subject code.",
            code="INVALID_SUBJECT_CODE",
            details={"subject_code": subject_code, "subject_type": subject_type},
        )
        self.subject_code = subject_code
        self.subject_type = subject_type
