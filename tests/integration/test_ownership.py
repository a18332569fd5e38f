"""
Integration tests for OwnershipResolver on a populated database.
"""

import uuid

import pytest

from catalogue.catalogue_server.errors import EntityNotFound
from catalogue.catalogue_server.schema.models import NewIssue, NewPrice


class TestResolve:
    """Tests for OwnershipResolver.resolve."""

    @pytest.mark.asyncio
    async def test_every_level_resolves_to_publisher(self, catalogue, seed, admin):
        publisher, imprint = await seed.tree()
        work = await seed.work(imprint.imprint_id)
        publication = await seed.publication(work.work_id)
        location = await seed.canonical_location(publication.publication_id)
        price = await catalogue.prices.create(
            admin, NewPrice(publication_id=publication.publication_id, currency_code="GBP", unit_price=15.95)
        )

        resolver = catalogue.resolver
        with catalogue.pool.connection() as conn:
            assert resolver.resolve(conn, "publisher", publisher.publisher_id) == publisher.publisher_id
            assert resolver.resolve(conn, "imprint", imprint.imprint_id) == publisher.publisher_id
            assert resolver.resolve(conn, "work", work.work_id) == publisher.publisher_id
            assert resolver.resolve(conn, "publication", publication.publication_id) == publisher.publisher_id
            assert resolver.resolve(conn, "location", location.location_id) == publisher.publisher_id
            assert resolver.resolve(conn, "price", price.price_id) == publisher.publisher_id

    @pytest.mark.asyncio
    async def test_composite_key(self, catalogue, seed, admin):
        publisher, imprint = await seed.tree()
        work = await seed.work(imprint.imprint_id)
        series = await seed.series(imprint.imprint_id)
        await catalogue.issues.create(
            admin, NewIssue(series_id=series.series_id, work_id=work.work_id, issue_ordinal=1)
        )

        with catalogue.pool.connection() as conn:
            owner = catalogue.resolver.resolve(conn, "issue", (series.series_id, work.work_id))
        assert owner == publisher.publisher_id

    @pytest.mark.asyncio
    async def test_distinct_trees(self, catalogue, seed):
        obp, obp_imprint = await seed.tree("Open Book Publishers")
        punctum, punctum_imprint = await seed.tree("Punctum Books")
        obp_work = await seed.work(obp_imprint.imprint_id)
        punctum_work = await seed.work(punctum_imprint.imprint_id)

        with catalogue.pool.connection() as conn:
            assert catalogue.resolver.resolve(conn, "work", obp_work.work_id) == obp.publisher_id
            assert catalogue.resolver.resolve(conn, "work", punctum_work.work_id) == punctum.publisher_id

    @pytest.mark.asyncio
    async def test_unowned_entity(self, catalogue, seed):
        contributor = await seed.contributor()

        with catalogue.pool.connection() as conn:
            assert catalogue.resolver.resolve(conn, "contributor", contributor.contributor_id) is None

    def test_missing_entity(self, catalogue):
        with catalogue.pool.connection() as conn:
            with pytest.raises(EntityNotFound) as exc_info:
                catalogue.resolver.resolve(conn, "location", uuid.uuid4())
        assert exc_info.value.entity == "location"

    def test_unknown_kind(self, catalogue):
        with catalogue.pool.connection() as conn:
            with pytest.raises(KeyError):
                catalogue.resolver.resolve(conn, "chapter", uuid.uuid4())


class TestOwnerOf:
    """Tests for OwnershipResolver.owner_of on projections."""

    @pytest.mark.asyncio
    async def test_new_projection_resolves_through_parent(self, catalogue, seed):
        publisher, imprint = await seed.tree()

        with catalogue.pool.connection() as conn:
            owner = catalogue.resolver.owner_of(
                conn, catalogue.works.entity_def, seed.new_work(imprint.imprint_id)
            )
        assert owner == publisher.publisher_id

    @pytest.mark.asyncio
    async def test_publisher_owns_itself(self, catalogue, seed):
        publisher = await seed.publisher()

        with catalogue.pool.connection() as conn:
            owner = catalogue.resolver.owner_of(conn, catalogue.publishers.entity_def, publisher)
        assert owner == publisher.publisher_id
