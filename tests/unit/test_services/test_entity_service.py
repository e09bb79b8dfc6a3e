"""Unit tests for organization and person write paths."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from relationship_api.core.background import JobStatus, QueuedTaskRunner
from relationship_api.services.county_assignment_service import CountyAssigner, EntityKind
from relationship_api.services.entity_service import (
    EntityNotFoundError,
    create_organization,
    create_person,
    get_organization,
    update_organization,
    update_person,
)


@pytest.fixture
def task_runner() -> MagicMock:
    runner = MagicMock()
    runner.submit_task.return_value = "job-1"
    return runner


@pytest.fixture
def resolver() -> MagicMock:
    resolver = MagicMock()
    resolver.resolve_address = AsyncMock(return_value=None)
    return resolver


@pytest.fixture
def assigner(resolver, task_runner, session_factory) -> CountyAssigner:
    return CountyAssigner(resolver, session_factory, task_runner)


class TestCreateOrganization:
    """Tests for create_organization."""

    async def test_direct_match_assigns_without_geocoding(
        self, async_session, assigner, task_runner, geography_units
    ) -> None:
        org, job_id = await create_organization(
            async_session, assigner, {"name": "Orange Partners", "city": "Orange", "state": "Florida"}
        )

        assert org.county_id == geography_units["orange"].id
        assert job_id is None
        task_runner.submit_task.assert_not_called()

    async def test_unmatched_city_schedules_after_commit(
        self, async_session, assigner, task_runner, geography_units
    ) -> None:
        org, job_id = await create_organization(
            async_session, assigner, {"name": "Acme", "city": "Miami", "state": "FL"}
        )

        assert job_id == "job-1"
        assert org.county_id is None
        assert await get_organization(async_session, org.id) is not None
        args = task_runner.submit_task.call_args.args
        assert args[1:] == (EntityKind.ORGANIZATION, org.id)

    async def test_no_address_nothing_scheduled(self, async_session, assigner, task_runner) -> None:
        org, job_id = await create_organization(async_session, assigner, {"name": "Bare"})
        assert job_id is None
        assert org.status == "active"
        task_runner.submit_task.assert_not_called()

    async def test_explicit_county_skips_workflow(self, async_session, assigner, task_runner, geography_units) -> None:
        broward = geography_units["broward"].id
        org, job_id = await create_organization(
            async_session, assigner, {"name": "Acme", "city": "Orange", "state": "FL", "county_id": broward}
        )

        assert org.county_id == broward
        assert job_id is None

    async def test_unknown_fields_ignored(self, async_session, assigner) -> None:
        forced = uuid.uuid4()
        org, _ = await create_organization(async_session, assigner, {"name": "Acme", "id": forced, "bogus": 1})
        assert org.id != forced

    async def test_unresolvable_city_create_still_succeeds(self, async_session, session_factory, resolver) -> None:
        runner = QueuedTaskRunner()
        assigner = CountyAssigner(resolver, session_factory, runner)

        org, job_id = await create_organization(
            async_session, assigner, {"name": "Springfield Co", "city": "Springfield", "state": "XX"}
        )
        await runner.drain()

        assert runner.get_status(job_id) == JobStatus.COMPLETED
        await async_session.refresh(org)
        assert org.county_id is None
        await runner.shutdown()


class TestUpdateOrganization:
    """Tests for update_organization."""

    async def test_city_change_on_unassigned_org_runs_direct_match(
        self, async_session, assigner, geography_units
    ) -> None:
        org, _ = await create_organization(async_session, assigner, {"name": "Acme", "city": "Miami", "state": "FL"})

        updated, job_id = await update_organization(async_session, assigner, org.id, {"city": "Broward"})

        assert updated.county_id == geography_units["broward"].id
        assert job_id is None

    async def test_assigned_org_keeps_county(self, async_session, assigner, task_runner, geography_units) -> None:
        org, _ = await create_organization(async_session, assigner, {"name": "Acme", "city": "Orange", "state": "FL"})
        task_runner.reset_mock()

        updated, job_id = await update_organization(async_session, assigner, org.id, {"city": "Miami"})

        assert updated.county_id == geography_units["orange"].id
        assert job_id is None
        task_runner.submit_task.assert_not_called()

    async def test_explicit_null_county_skips_workflow(
        self, async_session, assigner, task_runner, geography_units
    ) -> None:
        org, _ = await create_organization(async_session, assigner, {"name": "Acme", "city": "Orange", "state": "FL"})

        updated, job_id = await update_organization(async_session, assigner, org.id, {"county_id": None})

        assert updated.county_id is None
        assert job_id is None

    async def test_non_address_edit_does_not_requeue_geocoding(self, async_session, assigner, task_runner) -> None:
        org, first_job = await create_organization(
            async_session, assigner, {"name": "Acme", "address": "1 Main St", "city": "Nowhere", "state": "XX"}
        )
        assert first_job == "job-1"
        task_runner.reset_mock()

        updated, job_id = await update_organization(
            async_session, assigner, org.id, {"name": "Acme Two", "phone": "555-0100"}
        )

        assert updated.name == "Acme Two"
        assert job_id is None
        task_runner.submit_task.assert_not_called()

    async def test_resending_same_address_does_not_requeue(self, async_session, assigner, task_runner) -> None:
        org, _ = await create_organization(async_session, assigner, {"name": "Acme", "city": "Nowhere", "state": "XX"})
        task_runner.reset_mock()

        _, job_id = await update_organization(async_session, assigner, org.id, {"city": "Nowhere", "state": "XX"})

        assert job_id is None
        task_runner.submit_task.assert_not_called()

    async def test_address_change_on_unresolved_org_requeues(self, async_session, assigner, task_runner) -> None:
        org, _ = await create_organization(async_session, assigner, {"name": "Acme", "city": "Nowhere", "state": "XX"})
        task_runner.reset_mock()

        _, job_id = await update_organization(async_session, assigner, org.id, {"zip": "00001"})

        assert job_id == "job-1"
        assert task_runner.submit_task.call_args.args[1:] == (EntityKind.ORGANIZATION, org.id)

    async def test_missing_org_raises(self, async_session, assigner) -> None:
        with pytest.raises(EntityNotFoundError, match="Organization"):
            await update_organization(async_session, assigner, uuid.uuid4(), {"name": "x"})


class TestPeople:
    """Tests for create_person and update_person."""

    async def test_create_person_with_org(self, async_session, assigner, geography_units) -> None:
        org, _ = await create_organization(async_session, assigner, {"name": "Acme"})
        person, job_id = await create_person(
            async_session,
            assigner,
            {"org_id": org.id, "first_name": "Ana", "city": "Douglas", "state": "NE"},
        )

        assert person.org_id == org.id
        assert person.county_id == geography_units["douglas"].id
        assert job_id is None

    async def test_create_person_unknown_org_raises(self, async_session, assigner) -> None:
        with pytest.raises(EntityNotFoundError):
            await create_person(async_session, assigner, {"org_id": uuid.uuid4(), "first_name": "Ana"})

    async def test_create_person_schedules_geocoding(self, async_session, assigner, task_runner) -> None:
        person, job_id = await create_person(
            async_session, assigner, {"first_name": "Sam", "city": "Omaha", "state": "NE"}
        )
        assert job_id == "job-1"
        assert task_runner.submit_task.call_args.args[1:] == (EntityKind.PERSON, person.id)

    async def test_update_person(self, async_session, assigner) -> None:
        person, _ = await create_person(async_session, assigner, {"first_name": "Sam"})
        updated, job_id = await update_person(async_session, assigner, person.id, {"title": "Director"})
        assert updated.title == "Director"
        assert job_id is None

    async def test_person_title_edit_does_not_requeue(self, async_session, assigner, task_runner) -> None:
        person, first_job = await create_person(
            async_session, assigner, {"first_name": "Sam", "city": "Omaha", "state": "NE"}
        )
        assert first_job == "job-1"
        task_runner.reset_mock()

        _, job_id = await update_person(async_session, assigner, person.id, {"title": "Director"})

        assert job_id is None
        task_runner.submit_task.assert_not_called()

    async def test_update_missing_person_raises(self, async_session, assigner) -> None:
        with pytest.raises(EntityNotFoundError, match="Person"):
            await update_person(async_session, assigner, uuid.uuid4(), {"title": "x"})

    async def test_update_person_unknown_org_raises(self, async_session, assigner) -> None:
        person, _ = await create_person(async_session, assigner, {"first_name": "Sam"})
        with pytest.raises(EntityNotFoundError, match="Organization"):
            await update_person(async_session, assigner, person.id, {"org_id": uuid.uuid4()})
