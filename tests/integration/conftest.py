"""
Shared fixtures for catalogue integration tests.

Every test gets a fresh SQLite database in a temporary directory and a
Seeder that builds publisher trees through the public CRUD engines.
"""

import os
import tempfile
import uuid

import pytest

from catalogue.catalogue_server.access.acl import AccountAccess
from catalogue.catalogue_server.schema.enums import (
    LocationPlatform,
    PublicationType,
    SeriesType,
    WorkStatus,
    WorkType,
)
from catalogue.catalogue_server.schema.models import (
    NewContributor,
    NewImprint,
    NewLocation,
    NewPublication,
    NewPublisher,
    NewSeries,
    NewWork,
)
from catalogue.catalogue_server.store.catalogue import Catalogue
from catalogue.catalogue_server.store.pool import ConnectionPool


@pytest.fixture
def data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def catalogue(data_dir):
    pool = ConnectionPool(
        os.path.join(data_dir, "catalogue.db"),
        pool_size=2,
        timeout_seconds=1.0,
        wal_mode=False,
    )
    cat = Catalogue(pool)
    cat.initialize()
    yield cat
    cat.close()


@pytest.fixture
def admin():
    return AccountAccess(account_id=uuid.uuid4(), is_superuser=True)


class Seeder:
    """Creates catalogue records with sensible defaults."""

    def __init__(self, catalogue, admin):
        self.catalogue = catalogue
        self.admin = admin

    async def publisher(self, name="Open Book Publishers"):
        return await self.catalogue.publishers.create(self.admin, NewPublisher(publisher_name=name))

    async def imprint(self, publisher_id, name="OBP"):
        return await self.catalogue.imprints.create(
            self.admin, NewImprint(publisher_id=publisher_id, imprint_name=name)
        )

    async def tree(self, name="Open Book Publishers"):
        """A publisher with one imprint."""
        publisher = await self.publisher(name)
        imprint = await self.imprint(publisher.publisher_id, name=f"{name} Imprint")
        return publisher, imprint

    def new_work(self, imprint_id, **overrides):
        fields = dict(
            work_type=WorkType.MONOGRAPH,
            work_status=WorkStatus.ACTIVE,
            full_title="The Book of Water",
            title="The Book of Water",
            imprint_id=imprint_id,
            copyright_holder="A. Author",
            edition=1,
        )
        fields.update(overrides)
        return NewWork(**fields)

    async def work(self, imprint_id, **overrides):
        return await self.catalogue.works.create(self.admin, self.new_work(imprint_id, **overrides))

    async def publication(self, work_id, publication_type=PublicationType.PDF):
        return await self.catalogue.publications.create(
            self.admin, NewPublication(publication_type=publication_type, work_id=work_id)
        )

    async def canonical_location(self, publication_id):
        return await self.catalogue.locations.create(
            self.admin,
            NewLocation(
                publication_id=publication_id,
                location_platform=LocationPlatform.OTHER,
                canonical=True,
                landing_page="https://example.org/book",
                full_text_url="https://example.org/book.pdf",
            ),
        )

    async def series(self, imprint_id, name="Open Reports"):
        return await self.catalogue.series.create(
            self.admin,
            NewSeries(
                series_type=SeriesType.BOOK_SERIES,
                series_name=name,
                issn_print="1234-5678",
                issn_digital="8765-4321",
                imprint_id=imprint_id,
            ),
        )

    async def contributor(self, full_name="Ada Lovelace"):
        first, _, last = full_name.partition(" ")
        return await self.catalogue.contributors.create(
            self.admin, NewContributor(first_name=first, last_name=last, full_name=full_name)
        )


@pytest.fixture
def seed(catalogue, admin):
    return Seeder(catalogue, admin)
