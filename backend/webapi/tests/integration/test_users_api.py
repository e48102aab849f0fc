import json
import uuid

import pytest

from shared.dal.models import User
from webapi.users.types import MAX_NAME_LENGTH

NIL_UUID = "00000000-0000-0000-0000-000000000000"


def _create(client, login="johndoe", **extra) -> str:
    response = client.post("/api/users", json={"login": login, **extra})
    assert response.status_code == 201
    return response.json()


def _seed(client, count: int) -> None:
    repo = client.app.state.user_repo
    for i in range(count):
        client.portal.call(repo.insert, User(id=str(uuid.UUID(int=i + 1)), login=f"user{i:02d}"))


class TestOptions:
    def test_lists_allowed_methods(self, client):
        response = client.options("/api/users")

        assert response.status_code == 200
        assert response.headers["allow"] == "GET, POST, OPTIONS"


class TestCreateUser:
    def test_created_with_location(self, client):
        response = client.post("/api/users", json={"login": "abc123", "firstName": "Ann", "lastName": "Lee"})

        assert response.status_code == 201
        user_id = response.json()
        assert uuid.UUID(user_id)
        assert response.headers["location"] == f"http://testserver/api/users/{user_id}"

        fetched = client.get(response.headers["location"]).json()
        assert fetched == {
            "id": user_id,
            "login": "abc123",
            "fullName": "Lee Ann",
            "gamesPlayed": 0,
            "currentGameId": None,
        }

    def test_default_names(self, client):
        user_id = _create(client)

        assert client.get(f"/api/users/{user_id}").json()["fullName"] == "Doe John"

    def test_login_with_dash_is_rejected(self, client):
        response = client.post("/api/users", json={"login": "abc-123"})

        assert response.status_code == 422
        assert response.json() == {"errors": {"login": ["Login must contain only letters or digits"]}}

    def test_missing_login_is_rejected(self, client):
        response = client.post("/api/users", json={"firstName": "Ann"})

        assert response.status_code == 422
        assert "login" in response.json()["errors"]

    def test_empty_login_is_rejected(self, client):
        response = client.post("/api/users", json={"login": ""})

        assert response.status_code == 422
        assert response.json()["errors"]["login"] == ["Login must not be empty"]

    def test_overlong_login_is_rejected_and_listing_still_works(self, client):
        _create(client)

        response = client.post("/api/users", json={"login": "a" * 70000})

        assert response.status_code == 422
        assert "login" in response.json()["errors"]
        listing = client.get("/api/users")
        assert listing.status_code == 200
        assert [u["login"] for u in listing.json()] == ["johndoe"]

    def test_overlong_last_name_is_rejected(self, client):
        response = client.post("/api/users", json={"login": "abc", "lastName": "x" * (MAX_NAME_LENGTH + 1)})

        assert response.status_code == 422
        assert "lastName" in response.json()["errors"]

    @pytest.mark.parametrize("body", [b"", b"not json", b"[1, 2]", b"null"])
    def test_missing_or_invalid_body(self, client, body):
        response = client.post("/api/users", content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 400


class TestGetUser:
    def test_unknown_id_is_not_found(self, client):
        assert client.get(f"/api/users/{uuid.uuid4()}").status_code == 404

    def test_nil_id_is_not_found(self, client):
        assert client.get(f"/api/users/{NIL_UUID}").status_code == 404

    def test_non_uuid_does_not_route(self, client):
        assert client.get("/api/users/not-a-uuid").status_code == 404

    def test_head_returns_ok(self, client):
        user_id = _create(client)

        assert client.head(f"/api/users/{user_id}").status_code == 200

    def test_head_unknown_is_not_found(self, client):
        assert client.head(f"/api/users/{uuid.uuid4()}").status_code == 404


class TestGetUsers:
    def test_first_page_of_42(self, client):
        _seed(client, 42)

        response = client.get("/api/users", params={"pageNumber": 1, "pageSize": 10})

        assert response.status_code == 200
        assert len(response.json()) == 10
        pagination = json.loads(response.headers["x-pagination"])
        assert pagination == {
            "previousPageLink": None,
            "nextPageLink": "http://testserver/api/users?pageNumber=2&pageSize=10",
            "totalCount": 42,
            "pageSize": 10,
            "currentPage": 1,
            "totalPages": 5,
        }

    def test_middle_page_links_both_ways(self, client):
        _seed(client, 42)

        response = client.get("/api/users", params={"pageNumber": 3, "pageSize": 10})

        pagination = json.loads(response.headers["x-pagination"])
        assert pagination["previousPageLink"] == "http://testserver/api/users?pageNumber=2&pageSize=10"
        assert pagination["nextPageLink"] == "http://testserver/api/users?pageNumber=4&pageSize=10"

    def test_defaults(self, client):
        _seed(client, 12)

        pagination = json.loads(client.get("/api/users").headers["x-pagination"])

        assert pagination["currentPage"] == 1
        assert pagination["pageSize"] == 10

    @pytest.mark.parametrize(("requested", "expected"), [(100, 20), (21, 20), (0, 1), (-5, 1)])
    def test_page_size_is_clamped(self, client, requested, expected):
        _seed(client, 25)

        response = client.get("/api/users", params={"pageSize": requested})

        assert json.loads(response.headers["x-pagination"])["pageSize"] == expected
        assert len(response.json()) == expected

    def test_page_number_below_one_is_clamped(self, client):
        _seed(client, 3)

        response = client.get("/api/users", params={"pageNumber": -2})

        assert json.loads(response.headers["x-pagination"])["currentPage"] == 1
        assert len(response.json()) == 3

    def test_non_integer_page_number(self, client):
        assert client.get("/api/users", params={"pageNumber": "two"}).status_code == 400

    def test_page_number_beyond_storage_range(self, client):
        _seed(client, 3)

        response = client.get("/api/users", params={"pageNumber": "1000000000000000000000"})

        assert response.status_code == 200
        assert response.json() == []
        header = json.loads(response.headers["x-pagination"])
        assert header["totalCount"] == 3
        assert header["nextPageLink"] is None
        assert header["previousPageLink"].endswith("pageNumber=999999999999999999999&pageSize=10")

    def test_empty_store(self, client):
        response = client.get("/api/users")

        assert response.json() == []
        assert json.loads(response.headers["x-pagination"])["totalPages"] == 0


class TestUpdateUser:
    def test_put_new_id_creates(self, client):
        user_id = str(uuid.uuid4())

        response = client.put(
            f"/api/users/{user_id}",
            json={"login": "newbie", "firstName": "New", "lastName": "Bie"},
        )

        assert response.status_code == 201
        assert response.json() == user_id
        assert response.headers["location"].endswith(f"/api/users/{user_id}")

    def test_put_existing_id_replaces(self, client):
        user_id = _create(client)

        response = client.put(
            f"/api/users/{user_id}",
            json={"login": "renamed", "firstName": "Re", "lastName": "Named"},
        )

        assert response.status_code == 204
        assert client.get(f"/api/users/{user_id}").json()["login"] == "renamed"

    def test_put_requires_all_fields(self, client):
        response = client.put(f"/api/users/{uuid.uuid4()}", json={"login": "x"})

        assert response.status_code == 422
        errors = response.json()["errors"]
        assert set(errors) == {"firstName", "lastName"}

    def test_put_invalid_login(self, client):
        response = client.put(
            f"/api/users/{uuid.uuid4()}",
            json={"login": "a b", "firstName": "A", "lastName": "B"},
        )

        assert response.status_code == 422
        assert "login" in response.json()["errors"]

    def test_put_overlong_login_is_unprocessable(self, client):
        response = client.put(
            f"/api/users/{uuid.uuid4()}",
            json={"login": "a" * 70000, "firstName": "A", "lastName": "B"},
        )

        assert response.status_code == 422
        assert client.get("/api/users").json() == []

    def test_put_nil_id_is_bad_request(self, client):
        response = client.put(f"/api/users/{NIL_UUID}", json={"login": "x", "firstName": "A", "lastName": "B"})

        assert response.status_code == 400

    def test_put_without_body_is_bad_request(self, client):
        assert client.put(f"/api/users/{uuid.uuid4()}").status_code == 400


class TestPartiallyUpdateUser:
    def test_replace_login(self, client):
        user_id = _create(client)

        response = client.patch(
            f"/api/users/{user_id}",
            json=[{"op": "replace", "path": "/login", "value": "patched"}],
        )

        assert response.status_code == 204
        assert client.get(f"/api/users/{user_id}").json()["login"] == "patched"

    def test_patch_preserves_fields_outside_projection(self, client):
        user_id = str(uuid.uuid4())
        repo = client.app.state.user_repo
        client.portal.call(repo.insert, User(id=user_id, login="gamer", games_played=5, current_game_id="g1"))

        client.patch(f"/api/users/{user_id}", json=[{"op": "replace", "path": "/firstName", "value": "Pat"}])

        body = client.get(f"/api/users/{user_id}").json()
        assert body["gamesPlayed"] == 5
        assert body["currentGameId"] == "g1"
        assert body["fullName"] == " Pat"

    def test_patch_to_invalid_login_is_unprocessable(self, client):
        user_id = _create(client)

        response = client.patch(
            f"/api/users/{user_id}",
            json=[{"op": "replace", "path": "/login", "value": "bad-login"}],
        )

        assert response.status_code == 422
        assert client.get(f"/api/users/{user_id}").json()["login"] == "johndoe"

    def test_patch_to_overlong_login_is_unprocessable(self, client):
        user_id = _create(client)

        response = client.patch(
            f"/api/users/{user_id}",
            json=[{"op": "replace", "path": "/login", "value": "a" * 70000}],
        )

        assert response.status_code == 422
        assert client.get(f"/api/users/{user_id}").json()["login"] == "johndoe"

    def test_removing_required_field_is_unprocessable(self, client):
        user_id = _create(client)

        response = client.patch(f"/api/users/{user_id}", json=[{"op": "remove", "path": "/login"}])

        assert response.status_code == 422
        assert "login" in response.json()["errors"]

    def test_unknown_operation_is_unprocessable(self, client):
        user_id = _create(client)

        response = client.patch(f"/api/users/{user_id}", json=[{"op": "explode", "path": "/login"}])

        assert response.status_code == 422
        assert "patch" in response.json()["errors"]

    def test_adding_unknown_field_is_unprocessable(self, client):
        user_id = _create(client)

        response = client.patch(f"/api/users/{user_id}", json=[{"op": "add", "path": "/role", "value": "admin"}])

        assert response.status_code == 422
        assert response.json()["errors"] == {"role": ["Unknown field"]}

    def test_unknown_user_is_not_found(self, client):
        response = client.patch(
            f"/api/users/{uuid.uuid4()}",
            json=[{"op": "replace", "path": "/login", "value": "x"}],
        )

        assert response.status_code == 404

    @pytest.mark.parametrize("body", [{"op": "replace"}, [1], "text"])
    def test_non_patch_body_is_bad_request(self, client, body):
        user_id = _create(client)

        assert client.patch(f"/api/users/{user_id}", json=body).status_code == 400

    def test_missing_body_is_bad_request(self, client):
        user_id = _create(client)

        assert client.patch(f"/api/users/{user_id}").status_code == 400


class TestDeleteUser:
    def test_delete_existing(self, client):
        user_id = _create(client)

        assert client.delete(f"/api/users/{user_id}").status_code == 204
        assert client.get(f"/api/users/{user_id}").status_code == 404

    def test_delete_unknown_does_not_touch_storage(self, client):
        _create(client)

        assert client.delete(f"/api/users/{uuid.uuid4()}").status_code == 404
        assert json.loads(client.get("/api/users").headers["x-pagination"])["totalCount"] == 1


class TestServer:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_request_id_header_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc"})

        assert response.headers["x-request-id"] == "abc"

    def test_request_id_is_generated(self, client):
        assert len(client.get("/health").headers["x-request-id"]) == 32

    def test_unsupported_method_on_collection(self, client):
        assert client.delete("/api/users").status_code == 405

    def test_corrupt_stored_user_is_server_error(self, client):
        user_id = str(uuid.uuid4())
        db = client.app.state.db
        db.connection.execute("INSERT INTO users (id, login, data) VALUES (?, 'x', ?)", (user_id, b"\xc1"))
        db.connection.commit()

        response = client.get(f"/api/users/{user_id}")

        assert response.status_code == 500
        assert response.json() == {"error": "Stored data could not be read"}
