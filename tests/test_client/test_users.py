"""Tests for the Users API methods mixed into Client."""

from __future__ import annotations

import base64
import json
from typing import Any

import httpx
import pytest

from staffomatic.client import Client, UsersHost
from staffomatic.exceptions import (
    ErrorKind,
    Forbidden,
    InvalidUsageError,
    NotFound,
    ServerError,
)
from staffomatic.models import Credentials, ListUsersOptions, UserUpdate

API = "https://api.example.com/v3/"
WEB = "https://web.example.com/"

JANE = {"id": 7, "login": "jane", "name": "Jane"}


def _echo_user(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=JANE)


def _basic(email: str, password: str) -> str:
    token = base64.b64encode(f"{email}:{password}".encode()).decode("ascii")
    return f"Basic {token}"


class TestProtocol:
    def test_client_satisfies_users_host(self) -> None:
        assert isinstance(Client(), UsersHost)

    def test_aliases(self) -> None:
        assert Client.list_users is Client.all_users
        assert Client.get_user is Client.user


# ---------------------------------------------------------------------------
# user / get_user
# ---------------------------------------------------------------------------


class TestUser:
    def test_no_argument_fetches_authenticated_user(self, make_client) -> None:
        client, transport = make_client(_echo_user, access_token="tok")
        assert client.user() == JANE
        assert str(transport.last.url) == API + "user"

    def test_own_login_while_authenticated_fetches_user(self, make_client) -> None:
        client, transport = make_client(_echo_user, login="jane", access_token="tok")
        client.user("jane")
        assert str(transport.last.url) == API + "user"

    def test_own_email_with_basic_auth_fetches_user(self, make_client) -> None:
        client, transport = make_client(_echo_user, email="jane@x.com", password="p")
        client.get_user("jane@x.com")
        assert str(transport.last.url) == API + "user"

    def test_own_login_without_user_auth_fetches_users_login(self, make_client) -> None:
        client, transport = make_client(_echo_user, login="jane")
        client.user("jane")
        assert str(transport.last.url) == API + "users/jane"

    def test_other_login(self, make_client) -> None:
        client, transport = make_client(_echo_user, login="jane", access_token="tok")
        client.user("bob")
        assert str(transport.last.url) == API + "users/bob"

    def test_integer_id(self, make_client) -> None:
        client, transport = make_client(_echo_user)
        client.user(42)
        assert str(transport.last.url) == API + "users/42"

    def test_user_record(self, make_client) -> None:
        client, transport = make_client(_echo_user)
        client.user({"id": 9, "login": "bob"})
        assert str(transport.last.url) == API + "users/9"

    def test_extra_query_params(self, make_client) -> None:
        client, transport = make_client(_echo_user)
        client.user(42, fields="name")
        assert transport.last.url.params["fields"] == "name"

    def test_missing_user_raises_not_found(self, make_client) -> None:
        client, _ = make_client(
            lambda r: httpx.Response(404, json={"message": "Not Found"})
        )
        with pytest.raises(NotFound) as info:
            client.user(999)
        assert info.value.kind is ErrorKind.NOT_FOUND
        assert info.value.status_code == 404


class TestUserPath:
    def test_sub_path_for_authenticated_login(self) -> None:
        client = Client(login="jane", access_token="tok")
        assert client._user_path("jane", "shifts") == "user/shifts"

    def test_sub_path_for_other_user(self) -> None:
        client = Client(login="jane", access_token="tok")
        assert client._user_path("bob", "shifts") == "users/bob/shifts"

    def test_none_is_authenticated_user(self) -> None:
        assert Client()._user_path(None) == "user"

    def test_anonymous_client_never_matches_none_login(self) -> None:
        assert Client()._user_path(5) == "users/5"


# ---------------------------------------------------------------------------
# all_users / list_users
# ---------------------------------------------------------------------------


class TestAllUsers:
    @staticmethod
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("page") == "2":
            return httpx.Response(200, json=[{"id": 103}])
        return httpx.Response(
            200,
            json=[{"id": 101}, {"id": 102}],
            headers={"Link": f'<{API}users?since=100&page=2>; rel="next"'},
        )

    def test_sends_since_and_follows_links(self, make_client) -> None:
        client, transport = make_client(self._handler)
        users = list(client.all_users(since=100))
        assert [u["id"] for u in users] == [101, 102, 103]
        first = transport.requests[0]
        assert first.url.path == "/v3/users"
        assert first.url.params["since"] == "100"
        assert str(transport.requests[1].url) == f"{API}users?since=100&page=2"

    def test_accepts_options_model(self, make_client) -> None:
        client, transport = make_client(self._handler)
        list(client.list_users(ListUsersOptions(since=100, per_page=2)))
        assert transport.requests[0].url.params["per_page"] == "2"

    def test_accepts_mapping(self, make_client) -> None:
        client, transport = make_client(self._handler)
        list(client.all_users({"since": 100}))
        assert transport.requests[0].url.params["since"] == "100"

    def test_without_options_sends_no_query(self, make_client) -> None:
        client, transport = make_client(self._handler)
        list(client.all_users())
        assert str(transport.requests[0].url) == API + "users"

    def test_nothing_requested_until_iterated(self, make_client) -> None:
        client, transport = make_client(self._handler)
        client.all_users(since=100)
        assert transport.requests == []

    def test_unknown_option_rejected(self) -> None:
        with pytest.raises(InvalidUsageError):
            Client().all_users(sinse=100)

    def test_non_integer_since_rejected(self) -> None:
        with pytest.raises(InvalidUsageError):
            Client().all_users(since="yesterday")


# ---------------------------------------------------------------------------
# exchange_code_for_token
# ---------------------------------------------------------------------------


class TestExchangeCodeForToken:
    TOKEN = {"access_token": "e72e16c7", "token_type": "bearer", "scope": "user"}

    def _handler(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=self.TOKEN)

    def test_posts_to_web_endpoint(self, make_client) -> None:
        client, transport = make_client(self._handler)
        result = client.exchange_code_for_token("code123", "app-id", "app-secret")
        assert result == self.TOKEN
        request = transport.last
        assert request.method == "POST"
        assert str(request.url) == WEB + "login/oauth/access_token"
        assert json.loads(request.content) == {
            "code": "code123",
            "client_id": "app-id",
            "client_secret": "app-secret",
        }
        assert request.headers["content-type"] == "application/json"
        assert request.headers["accept"] == "application/json"

    def test_defaults_to_configured_application(self, make_client) -> None:
        client, transport = make_client(
            self._handler, client_id="cfg-id", client_secret="cfg-secret"
        )
        client.exchange_code_for_token("code123")
        body = transport.last_json()
        assert body["client_id"] == "cfg-id"
        assert body["client_secret"] == "cfg-secret"

    def test_configured_application_is_not_sent(self, make_client) -> None:
        client, transport = make_client(
            self._handler, client_id="cfg", client_secret="cfgsecret"
        )
        client.exchange_code_for_token("c", "other", "othersecret")
        request = transport.last
        assert str(request.url) == WEB + "login/oauth/access_token"
        assert not request.url.params
        body = transport.last_json()
        assert body["client_id"] == "other"
        assert body["client_secret"] == "othersecret"

    def test_user_credentials_are_not_sent(self, make_client) -> None:
        client, transport = make_client(self._handler, access_token="tok")
        client.exchange_code_for_token("c", "id", "secret")
        assert "authorization" not in transport.last.headers

    def test_extra_fields_are_sent(self, make_client) -> None:
        client, transport = make_client(self._handler)
        client.exchange_code_for_token(
            "code123", "id", "secret", redirect_uri="https://app.example.com/cb"
        )
        assert transport.last_json()["redirect_uri"] == "https://app.example.com/cb"

    def test_error_payload_is_returned(self, make_client) -> None:
        payload = {"error": "bad_verification_code"}
        client, _ = make_client(lambda r: httpx.Response(200, json=payload))
        assert client.exchange_code_for_token("stale", "id", "secret") == payload


# ---------------------------------------------------------------------------
# validate_credentials
# ---------------------------------------------------------------------------


class TestValidateCredentials:
    def test_valid(self, make_client) -> None:
        client, transport = make_client(_echo_user)
        assert client.validate_credentials(email="jane@x.com", password="good") is True
        request = transport.last
        assert str(request.url) == API + "user"
        assert request.headers["authorization"] == _basic("jane@x.com", "good")

    def test_rejected(self, make_client) -> None:
        client, _ = make_client(
            lambda r: httpx.Response(401, json={"message": "Bad credentials"})
        )
        assert client.validate_credentials(email="jane@x.com", password="bad") is False

    def test_server_error_propagates(self, make_client) -> None:
        client, _ = make_client(lambda r: httpx.Response(500))
        with pytest.raises(ServerError):
            client.validate_credentials(email="jane@x.com", password="p")

    def test_forbidden_propagates(self, make_client) -> None:
        client, _ = make_client(lambda r: httpx.Response(403))
        with pytest.raises(Forbidden):
            client.validate_credentials(email="jane@x.com", password="p")

    def test_accepts_credentials_model(self, make_client) -> None:
        client, transport = make_client(_echo_user)
        assert client.validate_credentials(Credentials(email="a@x.com", password="p"))
        assert transport.last.headers["authorization"] == _basic("a@x.com", "p")

    def test_uses_only_the_new_credentials(self, make_client) -> None:
        client, transport = make_client(
            _echo_user, access_token="tok", client_id="id", client_secret="sec"
        )
        client.validate_credentials(email="a@x.com", password="p")
        request = transport.last
        assert request.headers["authorization"] == _basic("a@x.com", "p")
        assert "client_id" not in request.url.params

    def test_leaves_original_client_untouched(self, make_client) -> None:
        client, transport = make_client(_echo_user, access_token="tok")
        client.validate_credentials(email="a@x.com", password="p")
        assert client.token_authenticated
        assert client.config.email is None
        client.user()
        assert transport.last.headers["authorization"] == "token tok"

    def test_missing_password_rejected(self) -> None:
        with pytest.raises(InvalidUsageError):
            Client().validate_credentials(email="a@x.com")

    def test_rejection_is_logged(self, make_client, verbose_output, capsys) -> None:
        client, _ = make_client(lambda r: httpx.Response(401))
        client.validate_credentials(email="a@x.com", password="bad")
        assert "Credentials rejected for a@x.com" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# update_user
# ---------------------------------------------------------------------------


class TestUpdateUser:
    def _handler(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={**JANE, **json.loads(request.content)})

    def test_patches_only_given_fields(self, make_client) -> None:
        client, transport = make_client(self._handler, access_token="tok")
        result = client.update_user(name="A")
        request = transport.last
        assert request.method == "PATCH"
        assert str(request.url) == API + "user"
        assert json.loads(request.content) == {"name": "A"}
        assert result == {**JANE, "name": "A"}

    def test_accepts_update_model(self, make_client) -> None:
        client, transport = make_client(self._handler, access_token="tok")
        client.update_user(UserUpdate(location="Berlin", hireable=False))
        assert transport.last_json() == {"location": "Berlin", "hireable": False}

    def test_explicit_none_is_sent(self, make_client) -> None:
        client, transport = make_client(self._handler, access_token="tok")
        client.update_user(bio=None)
        assert transport.last_json() == {"bio": None}

    def test_mapping_and_kwargs_merge(self, make_client) -> None:
        client, transport = make_client(self._handler, access_token="tok")
        client.update_user({"name": "A"}, company="Acme")
        assert transport.last_json() == {"name": "A", "company": "Acme"}

    def test_unknown_field_rejected_before_request(self, make_client) -> None:
        client, transport = make_client(self._handler, access_token="tok")
        with pytest.raises(InvalidUsageError) as info:
            client.update_user(compnay="Acme")
        assert info.value.kind is ErrorKind.INVALID_USAGE
        assert transport.requests == []

    def test_response_returned_unchanged(self, make_client) -> None:
        payload: dict[str, Any] = {"id": 7, "name": "A", "extra": [1, 2]}
        client, _ = make_client(lambda r: httpx.Response(200, json=payload))
        assert client.update_user(name="A") == payload
