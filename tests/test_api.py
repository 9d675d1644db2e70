"""HTTP boundary exercised through the Flask test client."""

from __future__ import annotations

import logging

import pytest

from ledger import create_app
from ledger.extensions import get_context
from ledger.services import auth as auth_service


@pytest.fixture()
def app(config):
    app = create_app(config=config)
    app.config.update(TESTING=True)
    yield app
    with app.app_context():
        get_context().close()
    logger = logging.getLogger("ledger")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


def _headers(account: dict) -> dict[str, str]:
    return {"X-User-Id": str(account["id"]), "X-User-Role": account["role"]}


def _signup(client, email, role="user", **extra):
    payload = {"name": email.split("@")[0], "email": email, "password": "password123", "role": role}
    payload.update(extra)
    return client.post("/auth/signup", json=payload)


@pytest.fixture()
def org(client):
    response = _signup(
        client, "org@example.org", role="organization", ngo_name="Org A", location="Springfield"
    )
    assert response.status_code == 201
    return response.get_json()


@pytest.fixture()
def user(client):
    response = _signup(client, "rater@example.org")
    assert response.status_code == 201
    return response.get_json()["account"]


@pytest.fixture()
def admin_account(app):
    with app.app_context():
        account = auth_service.ensure_admin(
            email="admin@example.org",
            password="adminpass1",
            session_factory=get_context().session_factory,
        )
    return {"id": account.id, "role": account.role}


def test_organization_signup_claims_location(org):
    assert org["account"]["role"] == "organization"
    assert org["claim"]["location"] == "Springfield"
    assert org["claim"]["is_active"] is True


def test_signup_on_held_location_conflicts(client, org):
    response = _signup(
        client, "late@example.org", role="organization", ngo_name="Org B", location="Springfield"
    )

    assert response.status_code == 409
    assert response.get_json()["error"] == "location_already_claimed"


def test_signup_validation_errors(client):
    response = client.post("/auth/signup", json={"email": "bad"})

    body = response.get_json()
    assert response.status_code == 400
    assert body["error"] == "validation_error"
    assert {"name", "email", "password"} <= set(body["errors"])


def test_login(client, user):
    ok = client.post("/auth/login", json={"email": "rater@example.org", "password": "password123"})
    assert ok.status_code == 200
    assert ok.get_json()["identity"] == {"account_id": user["id"], "role": "user"}

    bad = client.post("/auth/login", json={"email": "rater@example.org", "password": "nope-nope"})
    assert bad.status_code == 401
    assert bad.get_json()["error"] == "invalid_credentials"


def test_identity_required(client):
    response = client.post("/claims", json={"name": "X", "location": "Y"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "authentication_required"


def test_malformed_identity_is_rejected(client):
    response = client.get("/codes", headers={"X-User-Id": "abc", "X-User-Role": "user"})

    assert response.status_code == 401


def test_claim_and_release(client, org):
    headers = _headers(org["account"])
    created = client.post(
        "/claims", json={"name": "Org A", "location": "Shelbyville"}, headers=headers
    )
    assert created.status_code == 201
    claim_id = created.get_json()["claim"]["id"]

    listed = client.get("/claims").get_json()["claims"]
    assert {c["location"] for c in listed} == {"Springfield", "Shelbyville"}
    assert all(c["rating_count"] == 0 for c in listed)

    mine = client.get("/claims/mine", headers=headers).get_json()["claims"]
    assert len(mine) == 2

    released = client.delete(f"/claims/{claim_id}", headers=headers)
    assert released.status_code == 200
    assert released.get_json()["claim"]["is_active"] is False

    again = client.delete(f"/claims/{claim_id}", headers=headers)
    assert again.status_code == 404
    assert again.get_json()["error"] == "claim_not_found"


def test_user_cannot_claim(client, user):
    response = client.post(
        "/claims", json={"name": "Mine", "location": "Ogdenville"}, headers=_headers(user)
    )

    assert response.status_code == 403
    assert response.get_json()["error"] == "permission_denied"


def test_release_by_stranger_is_forbidden(client, org, user):
    response = client.delete(f"/claims/{org['claim']['id']}", headers=_headers(user))

    assert response.status_code == 403
    assert response.get_json()["error"] == "not_claim_owner"


def test_update_claim_details(client, org):
    response = client.patch(
        f"/claims/{org['claim']['id']}",
        json={"description": "Weekly food drive"},
        headers=_headers(org["account"]),
    )

    assert response.status_code == 200
    assert response.get_json()["claim"]["description"] == "Weekly food drive"


def test_code_and_rating_flow(client, org, user):
    org_headers = _headers(org["account"])
    claim_id = org["claim"]["id"]

    issued = client.post(f"/claims/{claim_id}/codes", headers=org_headers)
    assert issued.status_code == 201
    code = issued.get_json()["code"]["code"]
    assert len(code) == 6

    active = client.get("/codes", headers=org_headers).get_json()["codes"]
    assert [c["code"] for c in active] == [code]

    self_rating = client.post("/ratings", json={"code": code, "score": 5}, headers=org_headers)
    assert self_rating.status_code == 403
    assert self_rating.get_json()["error"] == "self_rating_forbidden"

    out_of_range = client.post("/ratings", json={"code": code, "score": 7}, headers=_headers(user))
    assert out_of_range.status_code == 400
    assert out_of_range.get_json()["error"] == "score_out_of_range"

    rated = client.post(
        "/ratings", json={"otp": code, "stars": 4, "comment": "Lovely"}, headers=_headers(user)
    )
    assert rated.status_code == 201
    assert rated.get_json()["rating"]["claim_name"] == "Org A"

    duplicate = client.post("/ratings", json={"code": code, "score": 5}, headers=_headers(user))
    assert duplicate.status_code == 409
    assert duplicate.get_json()["error"] == "duplicate_rating"

    ratings = client.get(f"/claims/{claim_id}/ratings").get_json()
    assert ratings["stats"] == {"count": 1, "average": 4.0}
    assert ratings["ratings"][0]["comment"] == "Lovely"

    mine = client.get("/ratings/mine", headers=_headers(user)).get_json()["ratings"]
    assert len(mine) == 1

    client.post(f"/claims/{claim_id}/codes", headers=org_headers)
    stale = client.post("/ratings", json={"code": code, "score": 5}, headers=_headers(user))
    assert stale.status_code == 400
    assert stale.get_json()["error"] == "invalid_or_expired_code"

    history = client.get(f"/claims/{claim_id}/codes", headers=org_headers).get_json()["codes"]
    assert [c["is_active"] for c in history] == [True, False]


def test_end_code(client, org):
    org_headers = _headers(org["account"])
    issued = client.post(f"/claims/{org['claim']['id']}/codes", headers=org_headers).get_json()

    ended = client.delete(f"/codes/{issued['code']['id']}", headers=org_headers)

    assert ended.status_code == 200
    assert ended.get_json()["code"]["is_active"] is False
    assert client.get("/codes", headers=org_headers).get_json()["codes"] == []


def test_issue_code_from_request_body(client, org):
    org_headers = _headers(org["account"])

    issued = client.post("/codes", json={"claim_id": org["claim"]["id"]}, headers=org_headers)
    assert issued.status_code == 201
    assert issued.get_json()["code"]["claim_id"] == org["claim"]["id"]

    invalid = client.post("/codes", json={"claim_id": "abc"}, headers=org_headers)
    assert invalid.status_code == 400
    assert "claim_id" in invalid.get_json()["errors"]


def test_numeric_code_is_rejected(client, org, user):
    client.post(f"/claims/{org['claim']['id']}/codes", headers=_headers(org["account"]))

    response = client.post("/ratings", json={"code": 123456, "score": 4}, headers=_headers(user))

    assert response.status_code == 400
    assert response.get_json()["error"] == "validation_error"
    assert "code" in response.get_json()["errors"]


def test_admin_routes(client, org, user, admin_account):
    forbidden = client.get("/admin/accounts", headers=_headers(user))
    assert forbidden.status_code == 403

    listing = client.get("/admin/accounts", headers=_headers(admin_account)).get_json()
    assert listing["stats"]["total"] == 3

    promoted = client.patch(
        f"/admin/accounts/{user['id']}/role",
        json={"role": "organization"},
        headers=_headers(admin_account),
    )
    assert promoted.get_json()["account"]["role"] == "organization"

    removed = client.delete(
        f"/admin/accounts/{org['account']['id']}", headers=_headers(admin_account)
    )
    assert removed.status_code == 200
    assert client.get("/claims").get_json()["claims"] == []

    swept = client.post("/admin/codes/sweep", headers=_headers(admin_account))
    assert swept.get_json() == {"swept": 0}


def test_projects_and_templates(client, org, user):
    org_headers = _headers(org["account"])
    project = client.post(
        "/projects", json={"title": "Community Garden"}, headers=org_headers
    ).get_json()["project"]

    task = client.post(
        "/tasks",
        json={
            "project_id": project["id"],
            "title": "Sign-up sheet",
            "template_url": "https://example.org/signup",
        },
        headers=org_headers,
    )
    assert task.status_code == 201

    templates = client.get("/templates").get_json()["templates"]
    assert [t["title"] for t in templates] == ["Sign-up sheet"]

    detail = client.get(f"/projects/{project['id']}").get_json()["project"]
    assert len(detail["tasks"]) == 1

    bad_filter = client.get("/tasks?status=done")
    assert bad_filter.status_code == 400

    stranger = client.post(
        "/tasks", json={"project_id": project["id"], "title": "Hijack"}, headers=_headers(user)
    )
    assert stranger.status_code == 403


def test_unknown_route_is_json(client):
    response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.get_json()["error"] == "not_found"


def test_cli_init_db(app):
    result = app.test_cli_runner().invoke(args=["ledger-init-db"])

    assert result.exit_code == 0
    assert "Database ready" in result.output


def test_cli_create_admin_then_login(app, client):
    runner = app.test_cli_runner()

    short = runner.invoke(args=["ledger-create-admin", "ops@example.org", "--password", "short"])
    assert short.exit_code != 0

    result = runner.invoke(
        args=["ledger-create-admin", "ops@example.org", "--password", "opspassword"]
    )
    assert result.exit_code == 0
    assert "Administrator ready: ops@example.org" in result.output

    login = client.post("/auth/login", json={"email": "ops@example.org", "password": "opspassword"})
    assert login.get_json()["identity"]["role"] == "admin"


def test_cli_sweep_codes(app):
    result = app.test_cli_runner().invoke(args=["ledger-sweep-codes"])

    assert result.exit_code == 0
    assert "Expired codes deactivated: 0" in result.output
