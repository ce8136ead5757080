"""Tests for the requests-based ``CastMeAPI`` client."""

import json
from unittest.mock import Mock

import pytest
import requests

from castme_client import NO_USER, CastMeAPI, CastMeAPIError


def make_response(status_code: int, body=None, reason: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = "http://castme.test/api/v1"
    response._content = json.dumps(body).encode("utf-8") if body is not None else b""
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def api(session):
    return CastMeAPI(base_url="http://castme.test/api/v1/", session=session)


def sent(session):
    """Method, url and json body of the last request."""
    kwargs = session.request.call_args.kwargs
    return kwargs["method"], kwargs["url"], kwargs["json"]


def test_register_user_posts_profile(api, session):
    session.request.return_value = make_response(201, {"status": "OK"})

    assert api.register_user("a@b.com", "123", {"name": "A", "surname": "B"}, {}, {"profession": "actor"}) is True

    method, url, body = sent(session)
    assert method == "POST"
    assert url == "http://castme.test/api/v1/users/"
    assert body["email"] == "a@b.com"
    assert body["professional_data"] == {"profession": "actor"}
    assert body["pics"] == []


def test_login_remembers_user_id(api, session):
    assert api.user_id == NO_USER
    assert not api.logged_in
    session.request.return_value = make_response(200, {"id": "abc"})

    assert api.login("a@b.com", "123") is True

    assert api.user_id == "abc"
    assert api.logged_in
    assert sent(session)[1] == "http://castme.test/api/v1/users/auth"


def test_retrieve_defaults_to_logged_in_user(api, session):
    api.user_id = "abc"
    session.request.return_value = make_response(200, {"email": "a@b.com"})

    assert api.retrieve_user() == {"email": "a@b.com"}
    assert sent(session)[:2] == ("GET", "http://castme.test/api/v1/users/abc")


def test_user_operations_require_login(api, session):
    with pytest.raises(CastMeAPIError, match="no user logged in"):
        api.get_castings()
    session.request.assert_not_called()


def test_unregister_logs_out(api, session):
    api.user_id = "abc"
    session.request.return_value = make_response(200, {"status": "OK"})

    api.unregister_user("a@b.com", "123")

    assert sent(session) == (
        "DELETE",
        "http://castme.test/api/v1/users/abc",
        {"email": "a@b.com", "password": "123"},
    )
    assert api.user_id == NO_USER


def test_apply_to_casting(api, session):
    session.request.return_value = make_response(201, {"status": "OK"})

    api.apply_to_casting("p1", "c1", user_id="u1")

    assert sent(session) == (
        "POST",
        "http://castme.test/api/v1/users/u1/castings",
        {"project_id": "p1", "casting_id": "c1"},
    )


def test_error_detail_is_raised(api, session):
    session.request.return_value = make_response(
        409, {"detail": "user with email a@b.com already exists", "kind": "Conflict"}, reason="Conflict"
    )

    with pytest.raises(CastMeAPIError) as exc_info:
        api.register_user("a@b.com", "123", {}, {}, {})

    assert exc_info.value.status_code == 409
    assert exc_info.value.message == "user with email a@b.com already exists"


def test_transport_error(api, session):
    session.request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(CastMeAPIError) as exc_info:
        api.list_projects()

    assert exc_info.value.status_code is None
    assert "refused" in exc_info.value.message
