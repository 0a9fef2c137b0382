"""
Unit tests for the in-memory repository.
Tests lookups, updates, relational scans and cascading deletes.
"""
import asyncio
import pytest
from datetime import datetime, timezone

from eventhub.db.models import Attendance, AttendanceStatusEnum, Event, User, Vendor, RoleEnum


def _event(organizer_id: str, **overrides) -> Event:
    fields = dict(
        title="Repo Event",
        date=datetime(2030, 1, 1, tzinfo=timezone.utc),
        capacity=10,
        price=0.0,
        organizer=organizer_id,
    )
    fields.update(overrides)
    return Event(**fields)


@pytest.mark.unit
class TestUserRepository:
    """Test user repository functions."""

    def test_insert_and_get_user(self, repo):
        user = repo.insert_user(User(name="New", email="new@example.com", hashed_password="h"))

        assert repo.get_user(user.id) is user
        assert user.role == RoleEnum.attendee
        assert user.created_at is not None

    def test_get_user_by_email(self, repo, test_attendee):
        assert repo.get_user_by_email("attendee@example.com") is test_attendee

    def test_get_user_by_email_not_found(self, repo):
        assert repo.get_user_by_email("nobody@example.com") is None

    def test_get_user_unknown_id_returns_none(self, repo):
        assert repo.get_user("does-not-exist") is None

    def test_ids_are_unique(self, repo):
        ids = {repo.insert_user(User(name=str(i), email=f"{i}@x.io", hashed_password="h")).id for i in range(50)}
        assert len(ids) == 50


@pytest.mark.unit
class TestEventRepository:
    """Test event repository functions."""

    def test_update_event_merges_fields(self, repo, test_event):
        updated = repo.update_event(test_event.id, title="Renamed", capacity=5)

        assert updated is test_event
        assert test_event.title == "Renamed"
        assert test_event.capacity == 5

    def test_update_event_rejects_immutable_fields(self, repo, test_event):
        with pytest.raises(ValueError, match="immutable"):
            repo.update_event(test_event.id, id="other")
        with pytest.raises(ValueError, match="immutable"):
            repo.update_event(test_event.id, created_at=datetime.now(timezone.utc))

    def test_update_event_unknown_field(self, repo, test_event):
        with pytest.raises(ValueError, match="Unknown field"):
            repo.update_event(test_event.id, colour="red")

    def test_update_missing_event_returns_none(self, repo):
        assert repo.update_event("missing", title="x") is None

    def test_events_for_vendor(self, repo, test_organizer):
        first = repo.insert_event(_event(test_organizer.id, vendor_ids={"v1"}))
        repo.insert_event(_event(test_organizer.id, vendor_ids={"v2"}))

        assert repo.events_for_vendor("v1") == [first]

    def test_delete_event_cascades_attendance(self, repo, test_event, test_attendee):
        other = repo.insert_event(_event(test_event.organizer))
        repo.insert_attendance(Attendance(
            event_id=test_event.id, user_id=test_attendee.id,
            user_name=test_attendee.name, user_email=test_attendee.email,
        ))
        kept = repo.insert_attendance(Attendance(
            event_id=other.id, user_id=test_attendee.id,
            user_name=test_attendee.name, user_email=test_attendee.email,
        ))

        assert repo.delete_event(test_event.id) is True
        assert repo.get_event(test_event.id) is None
        assert repo.attendance_for_event(test_event.id) == []
        assert list(repo.attendance.values()) == [kept]

    def test_delete_missing_event_returns_false(self, repo):
        assert repo.delete_event("missing") is False


@pytest.mark.unit
class TestVendorRepository:
    def test_get_vendor_by_user(self, repo, test_vendor_profile, test_vendor_user):
        assert repo.get_vendor_by_user(test_vendor_user.id) is test_vendor_profile

    def test_one_profile_per_user(self, repo, test_vendor_profile, test_vendor_user):
        with pytest.raises(ValueError, match="already has a vendor profile"):
            repo.insert_vendor(Vendor(user_id=test_vendor_user.id, company_name="Second"))


@pytest.mark.unit
class TestAttendanceRepository:
    def test_active_count_ignores_cancelled(self, repo, test_event, make_user):
        users = [make_user(f"a{i}@example.com") for i in range(3)]
        rows = [
            repo.insert_attendance(Attendance(
                event_id=test_event.id, user_id=u.id, user_name=u.name, user_email=u.email,
            ))
            for u in users
        ]
        repo.update_attendance(rows[0].id, status=AttendanceStatusEnum.cancelled)

        assert repo.active_attendee_count(test_event.id) == 2
        assert repo.active_attendance(test_event.id, users[0].id) is None
        assert repo.active_attendance(test_event.id, users[1].id) is rows[1]


@pytest.mark.unit
@pytest.mark.asyncio
class TestTransactions:
    async def test_transaction_rejects_unknown_collection(self, repo):
        with pytest.raises(ValueError, match="Unknown collections"):
            async with repo.transaction("tickets"):
                pass

    async def test_transaction_serializes_writers(self, repo):
        order = []

        async def worker(name):
            async with repo.transaction("events", "attendance"):
                order.append(f"{name}:start")
                await asyncio.sleep(0)
                order.append(f"{name}:end")

        await asyncio.gather(worker("a"), worker("b"))

        assert order == ["a:start", "a:end", "b:start", "b:end"]

    async def test_transaction_releases_on_error(self, repo):
        with pytest.raises(RuntimeError):
            async with repo.transaction("events"):
                raise RuntimeError("boom")

        async with repo.transaction("events"):
            pass
