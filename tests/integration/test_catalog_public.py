"""Integration tests for catalog_service PUBLIC API endpoints.

Tests discovery, program authoring, materials, stats and coach profiles.
"""

import uuid

import pytest
from libs.db.session import get_async_db
from services.catalog_service.app.main import app
from services.catalog_service.models import ProgramCategory
from sqlalchemy.exc import OperationalError
from tests.factories import UserFactory, program_payload, seed_coach, seed_program

# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_programs_envelope(client, db_session):
    coach = await seed_coach(db_session)
    for _ in range(3):
        await seed_program(db_session, coach.id)

    response = await client.get("/catalog/programs", params={"page_size": 2})

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["success"] is True
    page = body["data"]
    assert page["total_count"] == 3
    assert page["total_pages"] == 2
    assert page["current_page"] == 1
    assert page["page_size"] == 2
    assert len(page["docs"]) == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_programs_accepts_limit_alias(client, db_session):
    coach = await seed_coach(db_session)
    for _ in range(3):
        await seed_program(db_session, coach.id)

    response = await client.get("/catalog/programs", params={"limit": 1, "page": 3})

    page = response.json()["data"]
    assert page["page_size"] == 1
    assert page["current_page"] == 3
    assert len(page["docs"]) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_programs_filters(client, db_session):
    coach = await seed_coach(db_session)
    await seed_program(db_session, coach.id, category=ProgramCategory.ADVANCED)
    await seed_program(db_session, coach.id, category=ProgramCategory.BEGINNER)

    response = await client.get(
        "/catalog/programs", params={"category": "advanced", "sort": "ignored"}
    )

    docs = response.json()["data"]["docs"]
    assert [d["category"] for d in docs] == ["advanced"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_programs_invalid_filter_is_empty_not_error(client, db_session):
    coach = await seed_coach(db_session)
    await seed_program(db_session, coach.id)

    response = await client.get("/catalog/programs", params={"difficulty": "extreme"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["docs"] == []
    assert data["total_count"] == 0
    assert data["total_pages"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_programs_rejects_page_zero(client):
    response = await client.get("/catalog/programs", params={"page": 0})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_programs_by_coach(client, db_session):
    coach = await seed_coach(db_session)
    other = await seed_coach(db_session)
    mine = await seed_program(db_session, coach.id)
    await seed_program(db_session, other.id)

    response = await client.get(f"/catalog/programs/coach/{coach.id}")

    assert response.status_code == 200
    docs = response.json()["data"]["docs"]
    assert [d["id"] for d in docs] == [str(mine.id)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_programs_by_coach_without_programs(client, db_session):
    coach = await seed_coach(db_session)

    response = await client.get(f"/catalog/programs/coach/{coach.id}")

    assert response.status_code == 200
    assert response.json()["data"]["total_count"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_programs_by_unknown_coach(client):
    response = await client.get(f"/catalog/programs/coach/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


# ---------------------------------------------------------------------------
# Programs - read
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_program_includes_coach_and_user(client, db_session):
    coach = await seed_coach(db_session)
    program = await seed_program(db_session, coach.id)

    response = await client.get(f"/catalog/programs/{program.id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == str(program.id)
    assert data["coach"]["id"] == str(coach.id)
    assert data["coach"]["user"]["first_name"] == "Test"
    assert data["coach"]["user"]["email"].endswith("@catalog.io")


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("program_id", ["not-a-uuid", str(uuid.uuid4())])
async def test_get_program_not_found(client, program_id):
    response = await client.get(f"/catalog/programs/{program_id}")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "not_found"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_program_stats(client, db_session):
    coach = await seed_coach(db_session)
    program = await seed_program(
        db_session, coach.id, max_participants=10, current_enrollments=4
    )

    response = await client.get(f"/catalog/programs/{program.id}/stats")

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["seats_remaining"] == 6
    assert stats["fill_rate"] == 0.4
    assert stats["material_count"] == 0
    assert stats["days_remaining"] >= 0


# ---------------------------------------------------------------------------
# Programs - authoring
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_program_requires_token(client, db_session):
    coach = await seed_coach(db_session)

    response = await client.post("/catalog/programs", json=program_payload(coach.id))

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "unauthorized"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_program_rejects_member_role(client, db_session, member_headers):
    coach = await seed_coach(db_session)

    response = await client.post(
        "/catalog/programs", json=program_payload(coach.id), headers=member_headers
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "unauthorized"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_program_rejects_bad_signature(client, db_session):
    coach = await seed_coach(db_session)

    response = await client.post(
        "/catalog/programs",
        json=program_payload(coach.id),
        headers={"Authorization": "Bearer not.a.jwt"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_program(client, db_session, coach_headers):
    coach = await seed_coach(db_session)

    response = await client.post(
        "/catalog/programs", json=program_payload(coach.id), headers=coach_headers
    )

    assert response.status_code == 201, response.text
    data = response.json()["data"]
    assert data["title"] == "Spin Bowling Fundamentals"
    assert data["current_enrollments"] == 0
    assert data["total_sessions"] == 12
    assert data["materials"] == []
    assert data["price"] == "199.99"
    assert data["coach"]["id"] == str(coach.id)

    coach_response = await client.get(f"/catalog/coaches/{coach.id}")
    assert coach_response.json()["data"]["assigned_programs"] == [data["id"]]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_program_validation_error(client, db_session, coach_headers):
    coach = await seed_coach(db_session)
    payload = program_payload(coach.id, max_participants=0, category="expert")

    response = await client.post(
        "/catalog/programs", json=payload, headers=coach_headers
    )

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "validation_error"
    fields = {tuple(d["loc"])[-1] for d in error["details"]}
    assert {"max_participants", "category"} <= fields


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_program_unknown_coach(client, coach_headers):
    response = await client.post(
        "/catalog/programs",
        json=program_payload(uuid.uuid4()),
        headers=coach_headers,
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_program(client, db_session, coach_headers):
    coach = await seed_coach(db_session)
    program = await seed_program(db_session, coach.id)

    response = await client.put(
        f"/catalog/programs/{program.id}",
        json={"title": "Advanced Pull Shots", "difficulty": "hard"},
        headers=coach_headers,
    )

    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert data["title"] == "Advanced Pull Shots"
    assert data["difficulty"] == "hard"
    assert data["description"] == program.description


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_program_capacity_below_enrollments(
    client, db_session, coach_headers
):
    coach = await seed_coach(db_session)
    program = await seed_program(
        db_session, coach.id, max_participants=10, current_enrollments=6
    )

    response = await client.put(
        f"/catalog/programs/{program.id}",
        json={"max_participants": 5},
        headers=coach_headers,
    )

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "validation_error"
    assert error["details"] == {"max_participants": 5, "current_enrollments": 6}

    unchanged = await client.get(f"/catalog/programs/{program.id}")
    assert unchanged.json()["data"]["max_participants"] == 10


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_program_malformed_coach_id_is_validation_error(
    client, db_session, coach_headers
):
    coach = await seed_coach(db_session)
    program = await seed_program(db_session, coach.id)

    response = await client.put(
        f"/catalog/programs/{program.id}",
        json={"coach_id": "not-a-uuid"},
        headers=coach_headers,
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_program(client, db_session, coach_headers):
    coach = await seed_coach(db_session)
    program = await seed_program(db_session, coach.id)

    response = await client.delete(
        f"/catalog/programs/{program.id}", headers=coach_headers
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"id": str(program.id), "deleted": True}

    gone = await client.get(f"/catalog/programs/{program.id}")
    assert gone.status_code == 404

    coach_response = await client.get(f"/catalog/coaches/{coach.id}")
    assert coach_response.json()["data"]["assigned_programs"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_program_not_found(client, coach_headers):
    response = await client.delete(
        f"/catalog/programs/{uuid.uuid4()}", headers=coach_headers
    )

    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Materials
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_add_material(client, db_session, coach_headers):
    coach = await seed_coach(db_session)
    program = await seed_program(db_session, coach.id)

    response = await client.post(
        f"/catalog/programs/{program.id}/materials",
        json={"type": "video", "title": "Intro", "url": "https://cdn.example/intro"},
        headers=coach_headers,
    )

    assert response.status_code == 201, response.text
    materials = response.json()["data"]["materials"]
    assert materials[-1]["title"] == "Intro"
    assert materials[-1]["type"] == "video"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_add_material_unknown_type(client, db_session, coach_headers):
    coach = await seed_coach(db_session)
    program = await seed_program(db_session, coach.id)

    response = await client.post(
        f"/catalog/programs/{program.id}/materials",
        json={"type": "podcast", "title": "Episode 1"},
        headers=coach_headers,
    )

    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Coaches
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_and_get_coach(client, db_session, admin_headers):
    user = UserFactory.create(first_name="Asha")
    db_session.add(user)
    await db_session.commit()

    response = await client.post(
        "/catalog/coaches",
        json={
            "user_id": str(user.id),
            "specializations": ["batting", "batting", "fitness"],
            "experience": 7,
            "availability": [
                {"day": "saturday", "start_time": "08:00", "end_time": "12:00"}
            ],
        },
        headers=admin_headers,
    )

    assert response.status_code == 201, response.text
    created = response.json()["data"]
    assert created["specializations"] == ["batting", "fitness"]
    assert created["assigned_programs"] == []

    fetched = await client.get(f"/catalog/coaches/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["data"]["user"]["first_name"] == "Asha"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_coach_requires_admin(client, coach_headers):
    response = await client.post(
        "/catalog/coaches",
        json={"user_id": str(uuid.uuid4())},
        headers=coach_headers,
    )

    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_coach_not_found(client):
    response = await client.get(f"/catalog/coaches/{uuid.uuid4()}")

    assert response.status_code == 404


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "catalog"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_request_id_is_echoed(client):
    response = await client.get(
        "/catalog/programs", headers={"X-Request-ID": "req-123"}
    )

    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_request_id_is_generated(client):
    response = await client.get("/catalog/programs")

    assert response.headers.get("X-Request-ID")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_store_unavailable_returns_503(client):
    class _DeadSession:
        async def execute(self, *args, **kwargs):
            raise OperationalError("SELECT 1", {}, ConnectionRefusedError("refused"))

    async def _dead_db():
        yield _DeadSession()

    app.dependency_overrides[get_async_db] = _dead_db

    response = await client.get("/catalog/programs")

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "store_unavailable"
