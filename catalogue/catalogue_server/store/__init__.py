"""
Storage: connection pool, schema DDL, CRUD engines and the audit ledger.
"""

from .catalogue import Catalogue
from .constraints import DATABASE_CONSTRAINT_ERRORS, constraint_name, translate_error
from .crud import (
    ContributionCrud,
    ContributorCrud,
    EntityCrud,
    FunderCrud,
    FundingCrud,
    ImprintCrud,
    IssueCrud,
    LanguageCrud,
    LocationCrud,
    PriceCrud,
    PublicationCrud,
    PublisherCrud,
    SeriesCrud,
    SubjectCrud,
    WorkCrud,
    check_subject,
    check_work_fields,
)
from .history import AuditLedger, HistoryEntry
from .pool import ConnectionPool, PoolClosedError

__all__ = [
    "Catalogue",
    "ConnectionPool",
    "PoolClosedError",
    "AuditLedger",
    "HistoryEntry",
    "DATABASE_CONSTRAINT_ERRORS",
    "constraint_name",
    "translate_error",
    "EntityCrud",
    "PublisherCrud",
    "ImprintCrud",
    "WorkCrud",
    "PublicationCrud",
    "ContributorCrud",
    "ContributionCrud",
    "SeriesCrud",
    "IssueCrud",
    "LanguageCrud",
    "PriceCrud",
    "SubjectCrud",
    "FunderCrud",
    "FundingCrud",
    "LocationCrud",
    "check_subject",
    "check_work_fields",
]
