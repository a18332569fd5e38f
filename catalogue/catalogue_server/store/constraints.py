"""
Translation of storage failures into catalogue errors.

A violated constraint with an entry in DATABASE_CONSTRAINT_ERRORS becomes a
DatabaseConstraintError carrying that sentence. Any other integrity
violation becomes a DatabaseError with a generic message. Every other
sqlite3 failure is logged and surfaced as InternalError.

To list the constraints that can be named here:
    grep -o "CONSTRAINT [a-z_]*\\|UNIQUE INDEX IF NOT EXISTS [a-z_]*" ddl.py
"""

from __future__ import annotations

import logging
import re
import sqlite3
from types import MappingProxyType
from typing import Mapping, Optional

from ..errors import CatalogueError, DatabaseConstraintError, DatabaseError, InternalError
from .ddl import UNIQUE_CONSTRAINTS

logger = logging.getLogger(__name__)

DATABASE_CONSTRAINT_ERRORS: Mapping[str, str] = MappingProxyType({
    "contribution_contribution_ordinal_work_id_uniq":
        "A contribution with this ordinal number already exists.",
    "contribution_work_id_contributor_id_contribution_type_uniq":
        "A contribution of this type already exists for this contributor.",
    "issue_series_id_work_id_uniq":
        "An issue on the selected series already exists for the this work.",
    "publication_publication_type_work_id_uniq":
        "A publication with the selected type already exists.",
    "location_uniq_canonical_true_idx":
        "A canonical location already exists for this publication.",
    "location_url_check":
        "A location must have a landing page or a full text URL.",
})

_UNIQUE_INDEX = re.compile(r"^UNIQUE constraint failed: index '(?P<name>[^']+)'$")
_UNIQUE_COLUMNS = re.compile(r"^UNIQUE constraint failed: (?P<columns>.+)$")
_CHECK = re.compile(r"^CHECK constraint failed: (?P<name>.+)$")


def constraint_name(message: str) -> Optional[str]:
    """Extract the violated constraint name from a SQLite error message.

    Returns:
        The constraint name, or None when SQLite does not identify one
        (NOT NULL, FOREIGN KEY) or the column set is not declared.

    Example:
        >>> constraint_name("UNIQUE constraint failed: issue.series_id, issue.work_id")
        'issue_series_id_work_id_uniq'
    """
    match = _UNIQUE_INDEX.match(message)
    if match:
        return match.group("name")

    match = _UNIQUE_COLUMNS.match(message)
    if match:
        qualified = [c.strip() for c in match.group("columns").split(",")]
        tables = {c.split(".", 1)[0] for c in qualified}
        if len(tables) != 1:
            return None
        columns = frozenset(c.split(".", 1)[1] for c in qualified)
        return UNIQUE_CONSTRAINTS.get((tables.pop(), columns))

    match = _CHECK.match(message)
    if match:
        return match.group("name").strip()

    return None


def translate_error(error: sqlite3.Error, entity: str = "") -> CatalogueError:
    """Map a sqlite3 exception to the catalogue error callers receive."""
    message = str(error)
    if isinstance(error, sqlite3.IntegrityError):
        name = constraint_name(message)
        if name is not None and name in DATABASE_CONSTRAINT_ERRORS:
            return DatabaseConstraintError(DATABASE_CONSTRAINT_ERRORS[name], constraint=name)
        logger.info(
            "Unmapped integrity violation",
            extra={"entity": entity, "constraint": name, "raw": message},
        )
        return DatabaseError(message)

    logger.error(
        "Unexpected storage failure",
        exc_info=error,
        extra={"entity": entity},
    )
    return InternalError()
