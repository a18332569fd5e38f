"""
Catalogue facade.

Wires one connection pool, the schema registry, the ownership resolver,
the authorization gate and the audit ledger into one CRUD engine per
entity:

    >>> catalogue = Catalogue.from_settings(Settings())
    >>> catalogue.initialize()
    >>> publisher = await catalogue.publishers.create(admin, NewPublisher("Open Book"))
    >>> works = await catalogue.works.all(ListQuery(publishers=[publisher.publisher_id]))
"""

from __future__ import annotations

import logging
from typing import Optional

from ..access.acl import AuthorizationGate
from ..access.ownership import OwnershipResolver
from ..config import Settings
from ..schema.registry import SchemaRegistry, get_registry
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
)
from .history import AuditLedger
from .pool import ConnectionPool

logger = logging.getLogger(__name__)


class Catalogue:
    """Entry point to the data-access core.

    Attributes:
        pool: Shared connection pool
        registry: Frozen schema registry
        resolver: Ownership resolver shared by all engines
        publishers, imprints, works, ...: One engine per entity
    """

    def __init__(
        self,
        pool: ConnectionPool,
        registry: Optional[SchemaRegistry] = None,
        default_page_size: int = 100,
    ) -> None:
        self.pool = pool
        self.registry = registry or get_registry()
        self.resolver = OwnershipResolver(self.registry)
        self.gate = AuthorizationGate()
        self.ledger = AuditLedger()

        parts = (self.pool, self.registry, self.resolver, self.gate, self.ledger)
        self.publishers = PublisherCrud(*parts)
        self.imprints = ImprintCrud(*parts)
        self.works = WorkCrud(*parts)
        self.publications = PublicationCrud(*parts)
        self.contributors = ContributorCrud(*parts)
        self.contributions = ContributionCrud(*parts)
        self.series = SeriesCrud(*parts)
        self.issues = IssueCrud(*parts)
        self.languages = LanguageCrud(*parts)
        self.prices = PriceCrud(*parts)
        self.subjects = SubjectCrud(*parts)
        self.funders = FunderCrud(*parts)
        self.fundings = FundingCrud(*parts)
        self.locations = LocationCrud(*parts)

        self._engines: dict[str, EntityCrud] = {
            engine.entity_name: engine
            for engine in (
                self.publishers,
                self.imprints,
                self.works,
                self.publications,
                self.contributors,
                self.contributions,
                self.series,
                self.issues,
                self.languages,
                self.prices,
                self.subjects,
                self.funders,
                self.fundings,
                self.locations,
            )
        }
        for engine in self._engines.values():
            engine.default_page_size = default_page_size

    @classmethod
    def from_settings(cls, settings: Settings) -> Catalogue:
        settings.log_config()
        pool = ConnectionPool(
            settings.database_path,
            pool_size=settings.pool_size,
            timeout_seconds=settings.pool_timeout_seconds,
            busy_timeout_ms=settings.busy_timeout_ms,
            wal_mode=settings.wal_mode,
        )
        return cls(pool, default_page_size=settings.default_page_size)

    def engine(self, name: str) -> EntityCrud:
        """Engine for an entity by registered name (e.g. "work")."""
        if name not in self._engines:
            raise KeyError(f"Unknown entity '{name}'")
        return self._engines[name]

    def initialize(self) -> None:
        """Create the database schema if needed."""
        self.pool.initialize_schema()
        logger.info(
            "Catalogue ready",
            extra={"entities": len(self._engines), "fingerprint": self.registry.fingerprint},
        )

    def close(self) -> None:
        self.pool.close()
