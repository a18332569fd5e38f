"""
Integration tests for write authorization through the CRUD engines.
"""

import uuid

import pytest

from catalogue.catalogue_server.access.acl import AccountAccess
from catalogue.catalogue_server.errors import EntityNotFound, Unauthorised
from catalogue.catalogue_server.schema.models import (
    NewContributor,
    NewFunder,
    NewPublisher,
    PatchContributor,
    PatchWork,
)


def editor_of(*publishers):
    return AccountAccess(
        account_id=uuid.uuid4(),
        publishers=frozenset(p.publisher_id for p in publishers),
    )


def moved(work, imprint_id):
    fields = {name: getattr(work, name) for name in PatchWork.__dataclass_fields__}
    fields["imprint_id"] = imprint_id
    return PatchWork(**fields)


class TestOwnedEntities:
    """Writes on entities that belong to a publisher."""

    @pytest.mark.asyncio
    async def test_editor_creates_under_own_publisher(self, catalogue, seed):
        obp, imprint = await seed.tree()

        work = await catalogue.works.create(editor_of(obp), seed.new_work(imprint.imprint_id))
        assert work.imprint_id == imprint.imprint_id

    @pytest.mark.asyncio
    async def test_editor_cannot_create_under_other_publisher(self, catalogue, seed):
        obp, _ = await seed.tree("Open Book Publishers")
        _, punctum_imprint = await seed.tree("Punctum Books")

        with pytest.raises(Unauthorised):
            await catalogue.works.create(editor_of(obp), seed.new_work(punctum_imprint.imprint_id))
        assert await catalogue.works.count() == 0

    @pytest.mark.asyncio
    async def test_unauthorised_update_writes_nothing(self, catalogue, seed):
        obp, _ = await seed.tree("Open Book Publishers")
        _, punctum_imprint = await seed.tree("Punctum Books")
        work = await seed.work(punctum_imprint.imprint_id)

        with pytest.raises(Unauthorised):
            await catalogue.works.update(editor_of(obp), moved(work, punctum_imprint.imprint_id))

        assert await catalogue.works.get(work.work_id) == work
        assert await catalogue.works.history(work.work_id) == []

    @pytest.mark.asyncio
    async def test_move_needs_rights_on_both_publishers(self, catalogue, seed):
        obp, obp_imprint = await seed.tree("Open Book Publishers")
        punctum, punctum_imprint = await seed.tree("Punctum Books")
        work = await seed.work(obp_imprint.imprint_id)

        with pytest.raises(Unauthorised) as exc_info:
            await catalogue.works.update(editor_of(obp), moved(work, punctum_imprint.imprint_id))
        assert exc_info.value.details["publisher_ids"] == [str(punctum.publisher_id)]

        updated = await catalogue.works.update(
            editor_of(obp, punctum), moved(work, punctum_imprint.imprint_id)
        )
        assert updated.imprint_id == punctum_imprint.imprint_id

    @pytest.mark.asyncio
    async def test_delete_denied(self, catalogue, seed):
        obp, _ = await seed.tree("Open Book Publishers")
        _, punctum_imprint = await seed.tree("Punctum Books")
        work = await seed.work(punctum_imprint.imprint_id)

        with pytest.raises(Unauthorised):
            await catalogue.works.delete(editor_of(obp), work.work_id)
        assert await catalogue.works.get(work.work_id) == work

    @pytest.mark.asyncio
    async def test_nested_entity_checked_against_root_publisher(self, catalogue, seed):
        obp, _ = await seed.tree("Open Book Publishers")
        punctum, punctum_imprint = await seed.tree("Punctum Books")
        work = await seed.work(punctum_imprint.imprint_id)
        publication = await seed.publication(work.work_id)
        location = await seed.canonical_location(publication.publication_id)

        with pytest.raises(Unauthorised):
            await catalogue.locations.delete(editor_of(obp), location.location_id)

        deleted = await catalogue.locations.delete(editor_of(punctum), location.location_id)
        assert deleted == location

    @pytest.mark.asyncio
    async def test_missing_parent(self, catalogue, seed):
        obp, _ = await seed.tree()

        with pytest.raises(EntityNotFound):
            await catalogue.works.create(editor_of(obp), seed.new_work(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_anonymous_rejected(self, catalogue, seed):
        _, imprint = await seed.tree()

        with pytest.raises(Unauthorised):
            await catalogue.works.create(None, seed.new_work(imprint.imprint_id))


class TestPublishers:
    """Publisher creation is reserved to superusers."""

    @pytest.mark.asyncio
    async def test_editor_cannot_create_publisher(self, catalogue, seed):
        obp, _ = await seed.tree()

        with pytest.raises(Unauthorised):
            await catalogue.publishers.create(editor_of(obp), NewPublisher(publisher_name="Mine"))
        assert await catalogue.publishers.count() == 1

    @pytest.mark.asyncio
    async def test_superuser_creates_publisher(self, catalogue, admin):
        publisher = await catalogue.publishers.create(admin, NewPublisher(publisher_name="Mine"))
        assert publisher.publisher_name == "Mine"


class TestUnownedEntities:
    """Contributors and funders are shared by every publisher."""

    @pytest.mark.asyncio
    async def test_any_account_writes_contributors(self, catalogue):
        nobody = AccountAccess(account_id=uuid.uuid4())

        contributor = await catalogue.contributors.create(
            nobody, NewContributor(last_name="Lovelace", full_name="Ada Lovelace")
        )
        updated = await catalogue.contributors.update(
            nobody,
            PatchContributor(
                contributor_id=contributor.contributor_id,
                last_name="Lovelace",
                full_name="Ada Lovelace",
                orcid="https://orcid.org/0000-0002-1825-0097",
            ),
        )
        assert updated.orcid == "https://orcid.org/0000-0002-1825-0097"

    @pytest.mark.asyncio
    async def test_any_account_writes_funders(self, catalogue):
        nobody = AccountAccess(account_id=uuid.uuid4())

        funder = await catalogue.funders.create(nobody, NewFunder(funder_name="Wellcome Trust"))
        assert (await catalogue.funders.delete(nobody, funder.funder_id)) == funder

    @pytest.mark.asyncio
    async def test_anonymous_rejected(self, catalogue):
        with pytest.raises(Unauthorised):
            await catalogue.contributors.create(
                None, NewContributor(last_name="Lovelace", full_name="Ada Lovelace")
            )
