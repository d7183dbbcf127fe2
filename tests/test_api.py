import pytest

from conftest import PASSWORD, bearer, make_card, make_user
from models import CardStatus, Category, Role


def register(client, username="alice", email="alice@example.com", password=PASSWORD):
    return client.post("/auth/register", json={
        "first_name": "Alice",
        "last_name": "Liddell",
        "username": username,
        "email": email,
        "password": password,
    })


def login(client, identifier="alice", password=PASSWORD):
    res = client.post("/auth/login", json={"identifier": identifier, "password": password})
    # keep tests explicit about which token they send
    client.cookies.clear()
    return res


@pytest.fixture
def admin_headers(client, api_db):
    make_user(api_db, "admin", role=Role.ADMIN)
    return bearer(login(client, "admin").json()["session_token"])


@pytest.fixture
def user_headers(client):
    register(client, "player", "player@example.com")
    return bearer(login(client, "player").json()["session_token"])


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": True, "games": 0}


class TestAuthRoutes:
    def test_register_login_validate_logout(self, client):
        assert register(client).status_code == 201
        res = login(client)
        assert res.status_code == 200
        token = res.json()["session_token"]

        assert client.post("/auth/validate", json={"session_token": token}).json() == {"valid": True}
        assert client.post("/auth/validate", headers=bearer(token)).json() == {"valid": True}
        assert client.post("/auth/logout", headers=bearer(token)).status_code == 200
        assert client.post("/auth/validate", json={"session_token": token}).json() == {"valid": False}

    def test_login_sets_cookie(self, client):
        register(client)
        res = client.post("/auth/login", json={"identifier": "alice", "password": PASSWORD})
        assert res.cookies.get("session_token") == res.json()["session_token"]
        assert client.get("/auth/me").json()["username"] == "alice"
        client.cookies.clear()

    def test_validate_and_logout_never_fail(self, client):
        assert client.post("/auth/validate").json() == {"valid": False}
        assert client.post("/auth/validate", json={"session_token": "nope"}).json() == {"valid": False}
        assert client.post("/auth/logout").status_code == 200
        assert client.post("/auth/logout", headers=bearer("nope")).status_code == 200

    def test_unencodable_token_and_identifier(self, client):
        json_headers = {"Content-Type": "application/json"}
        res = client.post("/auth/validate", content=b'{"session_token": "\\ud800"}', headers=json_headers)
        assert res.status_code == 200
        assert res.json() == {"valid": False}
        res = client.post("/auth/login", content=b'{"identifier": "\\ud800", "password": "whatever-123"}', headers=json_headers)
        assert res.status_code == 401
        assert res.json()["kind"] == "AUTH"

    def test_register_errors_carry_kind(self, client):
        res = register(client, password="short")
        assert res.status_code == 400
        assert res.json()["kind"] == "VALIDATION"

        register(client)
        res = register(client, email="new@example.com")
        assert res.status_code == 409
        assert res.json() == {"detail": "Username or email already exists.", "kind": "CONFLICT"}

    def test_bad_credentials(self, client):
        register(client)
        for identifier, password in (("alice", "wrong-password"), ("ghost", PASSWORD)):
            res = login(client, identifier, password)
            assert res.status_code == 401
            assert res.json() == {"detail": "Invalid credentials.", "kind": "AUTH"}

    def test_me(self, client, user_headers):
        body = client.get("/auth/me", headers=user_headers).json()
        assert body["username"] == "player"
        assert body["role"] == "USER"
        assert "password_hash" not in body
        assert client.get("/auth/me").status_code == 401


class TestProfileRoutes:
    def test_profile_round_trip(self, client, user_headers):
        assert client.get("/profile", headers=user_headers).json()["email"] == "player@example.com"
        res = client.put("/profile", headers=user_headers, json={
            "first_name": "Pla", "last_name": "Yer", "username": "player2", "email": "p2@example.com",
        })
        assert res.status_code == 200
        assert res.json()["username"] == "player2"

    def test_change_password(self, client, user_headers):
        res = client.post("/profile/password", headers=user_headers,
                          json={"old_password": PASSWORD, "new_password": "another-pass-1"})
        assert res.status_code == 200
        assert login(client, "player", "another-pass-1").status_code == 200
        res = client.post("/profile/password", headers=user_headers,
                          json={"old_password": "wrong", "new_password": "another-pass-2"})
        assert res.status_code == 401


class TestCardRoutes:
    def card_body(self, english="Femur", category="BONES"):
        return {"category": category, "english": english, "latin": "Os femoris", "image_path": "/f.png"}

    def test_admin_submit_is_approved(self, client, admin_headers):
        res = client.post("/cards/admin", headers=admin_headers, json=self.card_body())
        assert res.status_code == 201
        assert res.json()["status"] == "APPROVED"

    def test_user_request_is_pending(self, client, user_headers):
        res = client.post("/cards/request", headers=user_headers, json=self.card_body())
        assert res.status_code == 201
        assert res.json()["status"] == "PENDING"

    def test_unknown_category_is_rejected(self, client, user_headers):
        res = client.post("/cards/request", headers=user_headers, json=self.card_body(category="MUSCLES"))
        assert res.status_code == 422

    def test_request_needs_session(self, client):
        res = client.post("/cards/request", json=self.card_body())
        assert res.status_code == 401
        assert res.json()["kind"] == "AUTH"

    @pytest.mark.parametrize("method,path", [
        ("post", "/cards/1/approve"),
        ("post", "/cards/1/reject"),
        ("get", "/cards/pending"),
        ("get", "/cards/pending/count"),
        ("get", "/cards/admin"),
        ("patch", "/cards/1"),
        ("delete", "/cards/1"),
    ])
    def test_authorization_boundary(self, client, api_db, user_headers, method, path):
        make_card(api_db)
        kwargs = {"json": {"english": "x"}} if method == "patch" else {}
        res = getattr(client, method)(path, headers=user_headers, **kwargs)
        assert res.status_code == 403
        assert res.json()["kind"] == "FORBIDDEN"

        res = getattr(client, method)(path, headers=bearer("expired-or-made-up"), **kwargs)
        assert res.status_code == 401
        assert res.json()["kind"] == "AUTH"

    def test_moderation_flow(self, client, admin_headers, user_headers):
        created = client.post("/cards/request", headers=user_headers, json=self.card_body("Ulna")).json()
        assert client.get("/cards/pending/count", headers=admin_headers).json() == {"count": 1}
        pending = client.get("/cards/pending", headers=admin_headers).json()
        assert [c["id"] for c in pending] == [created["id"]]
        assert pending[0]["status"] == "PENDING"

        assert client.post(f"/cards/{created['id']}/approve", headers=admin_headers).status_code == 200
        assert client.get("/cards/pending/count", headers=admin_headers).json() == {"count": 0}

        res = client.post("/cards/9999/reject", headers=admin_headers)
        assert res.status_code == 404
        assert res.json() == {"detail": "Card not found.", "kind": "NOT_FOUND"}

    def test_admin_crud(self, client, admin_headers):
        card_id = client.post("/cards/admin", headers=admin_headers, json=self.card_body()).json()["id"]
        res = client.patch(f"/cards/{card_id}", headers=admin_headers, json={"english": "Thigh bone"})
        assert res.status_code == 200
        assert res.json()["english"] == "Thigh bone"
        assert res.json()["latin"] == "Os femoris"

        listed = client.get("/cards/admin", headers=admin_headers).json()
        assert [c["id"] for c in listed] == [card_id]

        assert client.delete(f"/cards/{card_id}", headers=admin_headers).status_code == 200
        assert client.delete(f"/cards/{card_id}", headers=admin_headers).status_code == 404


class TestGameRoutes:
    def test_bones_two_card_scenario(self, client, api_db):
        make_card(api_db, Category.BONES, english="Femur")
        make_card(api_db, Category.BONES, english="Tibia")
        make_card(api_db, Category.BONES, english="Pending", status=CardStatus.PENDING)
        make_card(api_db, Category.BONES, english="Rejected", status=CardStatus.REJECTED)

        start = client.post("/game/start", json={"category": "BONES"}).json()
        assert start["total"] == 2 and start["finished"] is False
        game_id = start["game_id"]
        first = start["card"]["english"]
        assert first in {"Femur", "Tibia"}

        step = client.post(f"/game/{game_id}/next").json()
        assert step["finished"] is False and step["remaining"] == 0
        assert step["card"]["english"] == ({"Femur", "Tibia"} - {first}).pop()

        step = client.post(f"/game/{game_id}/next").json()
        assert step["finished"] is True and step["card"] is None and step["remaining"] == 0

        again = client.post(f"/game/{game_id}/reset").json()
        assert again["finished"] is False and again["remaining"] == 1
        assert again["card"]["english"] in {"Femur", "Tibia"}

    def test_empty_organs_scenario(self, client):
        start = client.post("/game/start", json={"category": "ORGANS"})
        assert start.status_code == 200
        body = start.json()
        assert body["finished"] is True and body["card"] is None and body["total"] == 0
        assert body["game_id"] is None

        res = client.post("/game/anything/next")
        assert res.status_code == 404
        assert res.json()["kind"] == "NOT_FOUND"

    def test_end_is_idempotent(self, client, api_db):
        make_card(api_db)
        game_id = client.post("/game/start", json={"category": "bones"}).json()["game_id"]
        assert client.delete(f"/game/{game_id}").status_code == 200
        assert client.delete(f"/game/{game_id}").status_code == 200
        assert client.post(f"/game/{game_id}/reset").status_code == 404

    def test_approval_reaches_new_games_only(self, client, api_db, admin_headers, user_headers):
        make_card(api_db, english="Skull")
        running = client.post("/game/start", json={"category": "BONES"}).json()
        created = client.post("/cards/request", headers=user_headers, json={
            "category": "BONES", "english": "Hyoid", "latin": "Os hyoideum", "image_path": "/h.png",
        }).json()
        assert client.post("/game/start", json={"category": "BONES"}).json()["total"] == 1

        client.post(f"/cards/{created['id']}/approve", headers=admin_headers)
        assert client.post("/game/start", json={"category": "BONES"}).json()["total"] == 2
        # the run started earlier keeps its own snapshot
        assert client.post(f"/game/{running['game_id']}/next").json()["finished"] is True


class TestStatsRoutes:
    def test_log_and_read(self, client, api_db, user_headers):
        card = make_card(api_db, english="Femur")
        other = make_card(api_db, english="Tibia")
        for card_id, won in ((card.id, True), (other.id, False), (other.id, False)):
            res = client.post("/stats/attempts", headers=user_headers, json={
                "card_id": card_id, "is_won": won, "category": "BONES", "language": "EN",
                "difficulty": "EASY", "wrong_count": 2, "max_wrong": 6,
            })
            assert res.status_code == 201

        stats = client.get("/stats/me", headers=user_headers).json()
        assert stats["guessed_count"] == 1
        assert stats["missed_count"] == 2
        assert [m["card_id"] for m in stats["missed_cards"]] == [other.id]

    def test_requires_session(self, client):
        assert client.get("/stats/me").status_code == 401
        res = client.post("/stats/attempts", json={"card_id": 1, "is_won": True})
        assert res.status_code == 401

    def test_unknown_card(self, client, user_headers):
        res = client.post("/stats/attempts", headers=user_headers, json={"card_id": 42, "is_won": True})
        assert res.status_code == 404


def test_admin_is_seeded_from_settings(tmp_path):
    from fastapi.testclient import TestClient

    from main import create_app
    from utils.config import Settings

    settings = Settings(
        database_url=f"sqlite:///{tmp_path / 'seed.db'}",
        seed_admin_username="boss",
        seed_admin_email="boss@example.com",
        seed_admin_password="boss-password",
    )
    with TestClient(create_app(settings)) as c:
        token = c.post("/auth/login", json={"identifier": "boss", "password": "boss-password"}).json()["session_token"]
        c.cookies.clear()
        assert c.get("/cards/pending/count", headers=bearer(token)).json() == {"count": 0}
