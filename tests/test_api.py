"""Tests for the reviewpool REST API."""
import pytest
from httpx import ASGITransport, AsyncClient

from reviewpool.api import create_app
from reviewpool.core.config.settings import ReviewPoolConfig


@pytest.fixture
async def client(db):
    """Create test client with in-memory database."""
    app = create_app(ReviewPoolConfig(db_path=":memory:", selection_seed=7))

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def backend_team(client):
    """Team "backend" with active users u1..u4."""
    response = await client.post(
        "/team/add",
        json={
            "team_name": "backend",
            "members": [
                {"user_id": user_id, "username": f"name-{user_id}", "is_active": True}
                for user_id in ("u1", "u2", "u3", "u4")
            ],
        },
    )
    assert response.status_code == 201
    return response.json()["team"]


def assert_error(response, status_code: int, code: str):
    assert response.status_code == status_code
    assert response.json()["error"]["code"] == code
    assert response.json()["error"]["message"]


@pytest.mark.asyncio
async def test_health_check(client):
    """Test the health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "reviewpool"


@pytest.mark.asyncio
async def test_create_and_get_team(client, backend_team):
    """Test creating a team and reading it back."""
    assert backend_team["team_name"] == "backend"
    assert [m["user_id"] for m in backend_team["members"]] == ["u1", "u2", "u3", "u4"]

    response = await client.get("/team/get", params={"team_name": "backend"})
    assert response.status_code == 200
    assert len(response.json()["members"]) == 4


@pytest.mark.asyncio
async def test_create_team_twice(client, backend_team):
    """Test a duplicate team name is rejected."""
    response = await client.post("/team/add", json={"team_name": "backend", "members": []})
    assert_error(response, 400, "TEAM_EXISTS")


@pytest.mark.asyncio
async def test_get_missing_team(client):
    """Test the error envelope for an unknown team."""
    response = await client.get("/team/get", params={"team_name": "nope"})
    assert_error(response, 404, "NOT_FOUND")


@pytest.mark.asyncio
async def test_create_pull_request(client, backend_team):
    """Test opening a PR assigns two teammates other than the author."""
    response = await client.post(
        "/pullRequest/create",
        json={"pull_request_id": "p1", "pull_request_name": "Add search", "author_id": "u1"},
    )
    assert response.status_code == 201

    pr = response.json()["pr"]
    assert pr["status"] == "OPEN"
    assert len(pr["assigned_reviewers"]) == 2
    assert "u1" not in pr["assigned_reviewers"]
    assert pr["createdAt"] is not None
    assert pr["mergedAt"] is None


@pytest.mark.asyncio
async def test_create_pull_request_errors(client, backend_team):
    """Test duplicate ids and unknown authors."""
    body = {"pull_request_id": "p1", "pull_request_name": "x", "author_id": "u1"}
    assert (await client.post("/pullRequest/create", json=body)).status_code == 201

    response = await client.post("/pullRequest/create", json=body)
    assert_error(response, 409, "PR_EXISTS")

    response = await client.post(
        "/pullRequest/create",
        json={"pull_request_id": "p2", "pull_request_name": "x", "author_id": "ghost"},
    )
    assert_error(response, 404, "NOT_FOUND")


@pytest.mark.asyncio
async def test_create_pull_request_invalid_body(client):
    """Test request validation."""
    response = await client.post("/pullRequest/create", json={"pull_request_id": "p1"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_reassign_and_merge(client, backend_team):
    """Test reassigning a reviewer, then merging and the reassign that follows."""
    created = await client.post(
        "/pullRequest/create",
        json={"pull_request_id": "p1", "pull_request_name": "x", "author_id": "u1"},
    )
    reviewers = created.json()["pr"]["assigned_reviewers"]
    spare = ({"u2", "u3", "u4"} - set(reviewers)).pop()

    response = await client.post(
        "/pullRequest/reassign",
        json={"pull_request_id": "p1", "old_user_id": reviewers[0]},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["replaced_by"] == spare
    assert data["pr"]["assigned_reviewers"] == [spare, reviewers[1]]

    response = await client.post("/pullRequest/merge", json={"pull_request_id": "p1"})
    assert response.status_code == 200
    merged = response.json()["pr"]
    assert merged["status"] == "MERGED"
    assert merged["mergedAt"] is not None

    again = await client.post("/pullRequest/merge", json={"pull_request_id": "p1"})
    assert again.status_code == 200
    # SQLite drops the UTC offset on read; compare to the second
    assert again.json()["pr"]["mergedAt"][:19] == merged["mergedAt"][:19]

    response = await client.post(
        "/pullRequest/reassign",
        json={"pull_request_id": "p1", "old_user_id": spare},
    )
    assert_error(response, 409, "PR_MERGED")


@pytest.mark.asyncio
async def test_reassign_errors(client, backend_team):
    """Test the reassign error codes."""
    created = await client.post(
        "/pullRequest/create",
        json={"pull_request_id": "p1", "pull_request_name": "x", "author_id": "u1"},
    )
    reviewers = created.json()["pr"]["assigned_reviewers"]
    spare = ({"u2", "u3", "u4"} - set(reviewers)).pop()

    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "p1", "old_user_id": spare}
    )
    assert_error(response, 409, "NOT_ASSIGNED")

    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "missing", "old_user_id": "u2"}
    )
    assert_error(response, 404, "NOT_FOUND")

    # Take the last free teammate out of the pool
    await client.post("/users/setIsActive", json={"user_id": spare, "is_active": False})
    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "p1", "old_user_id": reviewers[0]}
    )
    assert_error(response, 409, "NO_CANDIDATE")


@pytest.mark.asyncio
async def test_merge_missing_pull_request(client):
    """Test merging an unknown PR."""
    response = await client.post("/pullRequest/merge", json={"pull_request_id": "missing"})
    assert_error(response, 404, "NOT_FOUND")


@pytest.mark.asyncio
async def test_set_is_active(client, backend_team):
    """Test toggling a user's active flag."""
    response = await client.post("/users/setIsActive", json={"user_id": "u2", "is_active": False})
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["is_active"] is False
    assert user["team_name"] == "backend"

    response = await client.post("/users/setIsActive", json={"user_id": "ghost", "is_active": False})
    assert_error(response, 404, "NOT_FOUND")


@pytest.mark.asyncio
async def test_get_reviews(client, backend_team):
    """Test listing the PRs a user reviews."""
    created = await client.post(
        "/pullRequest/create",
        json={"pull_request_id": "p1", "pull_request_name": "x", "author_id": "u1"},
    )
    reviewer = created.json()["pr"]["assigned_reviewers"][0]

    response = await client.get("/users/getReview", params={"user_id": reviewer})
    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == reviewer
    assert [pr["pull_request_id"] for pr in data["pull_requests"]] == ["p1"]

    response = await client.get("/users/getReview", params={"user_id": "u1"})
    assert response.json()["pull_requests"] == []

    response = await client.get("/users/getReview", params={"user_id": "ghost"})
    assert_error(response, 404, "NOT_FOUND")


@pytest.mark.asyncio
async def test_bulk_deactivate(client, backend_team):
    """Test deactivating two reviewers of the same PR."""
    created = await client.post(
        "/pullRequest/create",
        json={"pull_request_id": "p1", "pull_request_name": "x", "author_id": "u1"},
    )
    reviewers = created.json()["pr"]["assigned_reviewers"]
    spare = ({"u2", "u3", "u4"} - set(reviewers)).pop()

    response = await client.post(
        "/users/bulkDeactivate",
        json={"team_name": "backend", "user_ids": reviewers},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["team_name"] == "backend"
    assert data["deactivated_users"] == reviewers
    assert data["duration_ms"] >= 0

    statuses = [slot["status"] for slot in data["reassignments"]]
    assert statuses == ["reassigned", "no_candidate"]
    assert data["reassignments"][0]["new_reviewer_id"] == spare

    team = (await client.get("/team/get", params={"team_name": "backend"})).json()
    active = {m["user_id"]: m["is_active"] for m in team["members"]}
    assert active[reviewers[0]] is False
    assert active[reviewers[1]] is False


@pytest.mark.asyncio
async def test_bulk_deactivate_validation(client, backend_team):
    """Test the batch is rejected as a whole."""
    await client.post("/team/add", json={
        "team_name": "frontend",
        "members": [{"user_id": "f1", "username": "Fay"}],
    })

    response = await client.post(
        "/users/bulkDeactivate", json={"team_name": "backend", "user_ids": ["u2", "f1"]}
    )
    assert_error(response, 400, "VALIDATION_ERROR")

    response = await client.post(
        "/users/bulkDeactivate", json={"team_name": "nope", "user_ids": ["u2"]}
    )
    assert_error(response, 404, "NOT_FOUND")

    response = await client.post(
        "/users/bulkDeactivate", json={"team_name": "backend", "user_ids": []}
    )
    assert_error(response, 400, "VALIDATION_ERROR")

    team = (await client.get("/team/get", params={"team_name": "backend"})).json()
    assert all(m["is_active"] for m in team["members"])


@pytest.mark.asyncio
async def test_stats(client, backend_team):
    """Test assignment statistics."""
    for pr_id in ("p1", "p2"):
        await client.post(
            "/pullRequest/create",
            json={"pull_request_id": pr_id, "pull_request_name": pr_id, "author_id": "u1"},
        )

    response = await client.get("/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["total_prs"] == 2
    assert data["total_users"] == 4
    assert data["average_reviewers_per_pr"] == 2.0
    assert sum(row["assignment_count"] for row in data["assignments_by_user"]) == 4
    assert {row["pr_id"] for row in data["reviewers_per_pr"]} == {"p1", "p2"}
    by_user = {row["user_id"]: row["assignment_count"] for row in data["assignments_by_user"]}
    assert by_user["u1"] == 0
