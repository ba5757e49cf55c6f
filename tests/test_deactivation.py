"""Tests for bulk deactivation and reviewer backfill."""
import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from reviewpool.core.assignment import DeactivationController, ReviewerSelector, SlotStatus
from reviewpool.core.errors import BatchValidationError, TeamNotFoundError, UserNotFoundError
from reviewpool.core.storage.repositories import PullRequestRepository, UserRepository


async def open_pr(session: AsyncSession, pr_id: str, author_id: str, reviewers: list[str]):
    await PullRequestRepository(session).create(pr_id, pr_id, author_id, reviewers)
    await session.commit()


@pytest.mark.asyncio
async def test_deactivating_both_reviewers_leaves_one_slot_unresolved(
    backend, session: AsyncSession, controller: DeactivationController
):
    """Test u2,u3 deactivated: one slot goes to u4, the other stays put."""
    await open_pr(session, "p1", "u1", ["u2", "u3"])

    report = await controller.bulk_deactivate("backend", ["u2", "u3"])

    pr = await PullRequestRepository(session).get("p1")
    assert pr.assigned_reviewers == ["u4", "u3"]
    assert [slot.status for slot in report.slots] == [
        SlotStatus.REASSIGNED,
        SlotStatus.NO_CANDIDATE,
    ]
    assert report.slots[0].new_reviewer_id == "u4"

    users = UserRepository(session)
    assert (await users.get("u2")).is_active is False
    assert (await users.get("u3")).is_active is False


@pytest.mark.asyncio
async def test_replacement_is_never_in_the_deactivated_batch(make_team, session: AsyncSession):
    """Test no slot is refilled with a user deactivated in the same call."""
    await make_team("backend", "a", "b", "c", "d", "e", "f")
    await open_pr(session, "p1", "a", ["b", "c"])
    await open_pr(session, "p2", "f", ["d", "b"])

    for seed in range(10):
        controller = DeactivationController(session, selector=ReviewerSelector(seed=seed))
        report = await controller.bulk_deactivate("backend", ["b", "c", "d"])
        for slot in report.reassigned:
            assert slot.new_reviewer_id not in {"b", "c", "d"}

        # Reset for the next round
        await UserRepository(session).bulk_set_active(["b", "c", "d"], True)
        await session.commit()

    repo = PullRequestRepository(session)
    for pr_id, author in (("p1", "a"), ("p2", "f")):
        pr = await repo.get(pr_id)
        assert author not in pr.assigned_reviewers
        assert len(set(pr.assigned_reviewers)) == len(pr.assigned_reviewers) == 2


@pytest.mark.asyncio
async def test_backfill_avoids_existing_co_reviewer(make_team, session: AsyncSession, controller):
    """Test the replacement never duplicates a reviewer already on the PR."""
    await make_team("backend", "u1", "u2", "u3", "u4")
    await open_pr(session, "p1", "u1", ["u2", "u4"])

    report = await controller.bulk_deactivate("backend", ["u2"])

    pr = await PullRequestRepository(session).get("p1")
    assert pr.assigned_reviewers == ["u3", "u4"]
    assert report.slots[0].new_reviewer_id == "u3"


@pytest.mark.asyncio
async def test_deactivation_succeeds_without_any_candidates(make_team, session: AsyncSession, controller):
    """Test deactivation holds even when no slot can be refilled."""
    await make_team("backend", "u1", "u2")
    await open_pr(session, "p1", "u1", ["u2"])

    report = await controller.bulk_deactivate("backend", ["u2"])

    assert report.deactivated_user_ids == ["u2"]
    assert report.reassigned == []
    assert report.unresolved[0].status == SlotStatus.NO_CANDIDATE
    assert (await UserRepository(session).get("u2")).is_active is False
    assert (await PullRequestRepository(session).get("p1")).assigned_reviewers == ["u2"]


@pytest.mark.asyncio
async def test_merged_prs_are_not_touched(backend, session: AsyncSession, controller):
    """Test only open pull requests are backfilled."""
    await open_pr(session, "p1", "u1", ["u2"])
    await PullRequestRepository(session).merge("p1")
    await session.commit()

    report = await controller.bulk_deactivate("backend", ["u2"])

    assert report.slots == []
    assert (await PullRequestRepository(session).get("p1")).assigned_reviewers == ["u2"]


@pytest.mark.asyncio
async def test_author_is_not_a_candidate(make_team, session: AsyncSession, controller):
    """Test a deactivated reviewer's slot never goes to the PR author."""
    await make_team("backend", "u1", "u2")
    await open_pr(session, "p1", "u1", ["u2"])

    report = await controller.bulk_deactivate("backend", ["u2"])

    assert report.slots[0].status == SlotStatus.NO_CANDIDATE


@pytest.mark.asyncio
async def test_duplicate_ids_are_collapsed(backend, session: AsyncSession, controller):
    """Test repeated ids in the request are treated once."""
    await open_pr(session, "p1", "u1", ["u2"])

    report = await controller.bulk_deactivate("backend", ["u2", "u2"])

    assert report.deactivated_user_ids == ["u2"]
    assert len(report.slots) == 1


@pytest.mark.asyncio
async def test_empty_batch_rejected(backend, controller: DeactivationController):
    """Test an empty user list is a validation error."""
    with pytest.raises(BatchValidationError):
        await controller.bulk_deactivate("backend", [])


@pytest.mark.asyncio
async def test_unknown_team_rejected(backend, controller: DeactivationController):
    """Test a missing team fails before any write."""
    with pytest.raises(TeamNotFoundError):
        await controller.bulk_deactivate("nope", ["u2"])


@pytest.mark.asyncio
async def test_unknown_user_aborts_whole_batch(backend, session: AsyncSession, controller):
    """Test one bad id means nobody is deactivated."""
    with pytest.raises(UserNotFoundError):
        await controller.bulk_deactivate("backend", ["u2", "ghost"])

    assert (await UserRepository(session).get("u2")).is_active is True


@pytest.mark.asyncio
async def test_user_from_other_team_aborts_whole_batch(make_team, session: AsyncSession, controller):
    """Test a user outside the named team is rejected and nothing changes."""
    await make_team("backend", "u1", "u2")
    await make_team("frontend", "f1")

    with pytest.raises(BatchValidationError):
        await controller.bulk_deactivate("backend", ["u2", "f1"])

    users = UserRepository(session)
    assert (await users.get("u2")).is_active is True
    assert (await users.get("f1")).is_active is True


@pytest.mark.asyncio
async def test_vanished_reviewer_is_not_in_snapshot(backend, session: AsyncSession, controller):
    """Test slots held by ids outside the batch are left alone."""
    await open_pr(session, "p1", "u1", ["ghost", "u2"])

    report = await controller.bulk_deactivate("backend", ["u2"])

    pr = await PullRequestRepository(session).get("p1")
    assert pr.assigned_reviewers[0] == "ghost"
    assert [slot.old_reviewer_id for slot in report.slots] == ["u2"]


def change_after_snapshot(monkeypatch, db, controller: DeactivationController, change):
    """Commit ``change(repo)`` from another session right after the open-PR snapshot."""
    snapshot = controller.pull_requests.list_open_by_reviewers

    async def snapshot_then_change(user_ids):
        pull_requests = await snapshot(user_ids)
        async with db.session() as other:
            await change(PullRequestRepository(other))
            await other.commit()
        return pull_requests

    monkeypatch.setattr(controller.pull_requests, "list_open_by_reviewers", snapshot_then_change)


@pytest.mark.asyncio
async def test_slot_skipped_when_pr_merged_after_snapshot(
    backend, db, session: AsyncSession, controller, monkeypatch
):
    """Test a PR merged mid-batch is left alone and the deactivation holds."""
    await open_pr(session, "p1", "u1", ["u2", "u3"])

    async def merge(repo):
        await repo.merge("p1")

    change_after_snapshot(monkeypatch, db, controller, merge)

    report = await controller.bulk_deactivate("backend", ["u2"])

    assert [slot.status for slot in report.slots] == [SlotStatus.SKIPPED]
    assert report.slots[0].detail == "PR no longer open"
    assert (await UserRepository(session).get("u2")).is_active is False
    assert (await PullRequestRepository(session).get("p1")).assigned_reviewers == ["u2", "u3"]


@pytest.mark.asyncio
async def test_slot_skipped_when_reviewer_swapped_after_snapshot(
    backend, db, session: AsyncSession, controller, monkeypatch
):
    """Test a slot already refilled by someone else is not touched again."""
    await open_pr(session, "p1", "u1", ["u2", "u3"])

    async def swap(repo):
        await repo.replace_reviewer("p1", "u2", "u4")

    change_after_snapshot(monkeypatch, db, controller, swap)

    report = await controller.bulk_deactivate("backend", ["u2"])

    assert [slot.status for slot in report.slots] == [SlotStatus.SKIPPED]
    assert report.slots[0].detail == "reviewer no longer assigned"
    assert (await PullRequestRepository(session).get("p1")).assigned_reviewers == ["u4", "u3"]


@pytest.mark.asyncio
async def test_failed_slot_write_is_reported_and_deactivation_holds(
    backend, session: AsyncSession, controller, monkeypatch
):
    """Test a storage error on one slot is recorded, rolled back, and does not undo deactivation."""
    await open_pr(session, "p1", "u1", ["u2", "u3"])

    async def failing_replace(pr_id, old_user_id, new_user_id):
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(controller.pull_requests, "replace_reviewer", failing_replace)

    report = await controller.bulk_deactivate("backend", ["u2"])

    slot = report.slots[0]
    assert slot.status == SlotStatus.WRITE_FAILED
    assert "disk I/O error" in slot.detail
    assert report.reassigned == []
    assert (await UserRepository(session).get("u2")).is_active is False
    assert (await PullRequestRepository(session).get("p1")).assigned_reviewers == ["u2", "u3"]
