"""
HTTP-level tests for the /users endpoints.
"""

import pytest

from conftest import PASSWORD, auth_headers, sign_up


def _sign_up_body(**overrides) -> dict:
    body = {
        "email": "a@b.com",
        "password": PASSWORD,
        "confirmPassword": PASSWORD,
        "name": "Al",
    }
    body.update(overrides)
    return body


class TestSignUp:
    def test_success_returns_token_and_user_without_password(self, client):
        response = client.post("/users/sign_up", json=_sign_up_body())

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        assert body["token"]
        assert body["user"]["email"] == "a@b.com"
        assert body["user"]["name"] == "Al"
        assert "password" not in body["user"]
        assert "password_hash" not in body["user"]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"email": ""},
            {"password": None},
            {"confirmPassword": ""},
            {"name": ""},
        ],
    )
    def test_missing_fields(self, client, overrides):
        response = client.post("/users/sign_up", json=_sign_up_body(**overrides))
        assert response.status_code == 400
        assert response.json()["status"] == "error"

    def test_absent_field_gets_same_envelope(self, client):
        body = _sign_up_body()
        del body["name"]
        response = client.post("/users/sign_up", json=body)
        assert response.status_code == 400
        assert response.json() == {"status": "error", "message": "Required fields are missing or empty"}

    @pytest.mark.parametrize(
        "password, message",
        [
            ("abc1234", "at least 8"),
            ("abcdefgh", "letters and digits"),
            ("12345678", "letters and digits"),
        ],
    )
    def test_weak_password_rejected_even_if_rest_is_valid(self, client, password, message):
        response = client.post(
            "/users/sign_up",
            json=_sign_up_body(password=password, confirmPassword=password),
        )
        assert response.status_code == 400
        assert message in response.json()["message"]

    def test_password_mismatch(self, client):
        response = client.post("/users/sign_up", json=_sign_up_body(confirmPassword="abc12346"))
        assert response.status_code == 400
        assert "do not match" in response.json()["message"]

    def test_short_name(self, client):
        response = client.post("/users/sign_up", json=_sign_up_body(name="A"))
        assert response.status_code == 400
        assert "Name" in response.json()["message"]

    def test_invalid_email(self, client):
        response = client.post("/users/sign_up", json=_sign_up_body(email="not-an-email"))
        assert response.status_code == 400
        assert "Email" in response.json()["message"]

    def test_duplicate_email(self, client):
        sign_up(client)
        response = client.post("/users/sign_up", json=_sign_up_body(email="A@B.com", name="Other"))
        assert response.status_code == 400
        assert "already registered" in response.json()["message"]

    def test_malformed_json(self, client):
        response = client.post(
            "/users/sign_up",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["status"] == "error"


class TestSignIn:
    def test_success(self, client):
        sign_up(client)
        response = client.post("/users/sign_in", json={"email": "a@b.com", "password": PASSWORD})

        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["user"]["name"] == "Al"
        assert "password_hash" not in body["user"]

    def test_missing_fields(self, client):
        response = client.post("/users/sign_in", json={"email": "a@b.com"})
        assert response.status_code == 400

    def test_unknown_email(self, client):
        response = client.post("/users/sign_in", json={"email": "nobody@b.com", "password": PASSWORD})
        assert response.status_code == 400
        assert "No account" in response.json()["message"]

    def test_wrong_password(self, client):
        sign_up(client)
        response = client.post("/users/sign_in", json={"email": "a@b.com", "password": "abc99999"})
        assert response.status_code == 400
        assert response.json()["message"] == "Incorrect password"


class TestProfile:
    def test_requires_token(self, client):
        response = client.get("/users/profile")
        assert response.status_code == 401
        assert response.json()["status"] == "error"

    def test_rejects_bad_token(self, client):
        response = client.get("/users/profile", headers=auth_headers("bogus.token.value"))
        assert response.status_code == 401

    def test_get_profile(self, client):
        token = sign_up(client)["token"]
        response = client.get("/users/profile", headers=auth_headers(token))

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "a@b.com"

    def test_update_name(self, client):
        token = sign_up(client)["token"]
        response = client.patch("/users/profile", json={"name": "Alan"}, headers=auth_headers(token))

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Alan"
        assert client.get("/users/profile", headers=auth_headers(token)).json()["user"]["name"] == "Alan"

    @pytest.mark.parametrize("body", [{}, {"name": ""}])
    def test_update_name_requires_value(self, client, body):
        token = sign_up(client)["token"]
        response = client.patch("/users/profile", json=body, headers=auth_headers(token))
        assert response.status_code == 400


class TestUpdatePassword:
    def test_change_then_sign_in_with_new_password(self, client):
        token = sign_up(client)["token"]
        response = client.post(
            "/users/updatePassword",
            json={"password": "newpass99", "confirmPassword": "newpass99"},
            headers=auth_headers(token),
        )

        assert response.status_code == 200
        assert response.json()["token"]
        old = client.post("/users/sign_in", json={"email": "a@b.com", "password": PASSWORD})
        assert old.status_code == 400
        new = client.post("/users/sign_in", json={"email": "a@b.com", "password": "newpass99"})
        assert new.status_code == 200

    @pytest.mark.parametrize(
        "password, confirm",
        [("newpass99", "newpass98"), ("short1", "short1"), ("onlyletters", "onlyletters")],
    )
    def test_rules_match_registration(self, client, password, confirm):
        token = sign_up(client)["token"]
        response = client.post(
            "/users/updatePassword",
            json={"password": password, "confirmPassword": confirm},
            headers=auth_headers(token),
        )
        assert response.status_code == 400

    def test_requires_token(self, client):
        response = client.post(
            "/users/updatePassword",
            json={"password": "newpass99", "confirmPassword": "newpass99"},
        )
        assert response.status_code == 401
