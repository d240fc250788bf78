"""Tests for the polling client, driven against the Flask test client."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import requests


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from emailspy.client import EmailCheckError, EmailSpyClient, PollTimeout  # noqa: E402


class _Response:
    """Adapts a Flask test response to the parts of ``requests.Response`` the client uses."""

    def __init__(self, flask_response) -> None:
        self.status_code = flask_response.status_code
        self._body = flask_response.get_json()

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FlaskSession:
    """Routes ``requests.Session`` calls into a Flask test client."""

    def __init__(self, test_client, base_url: str) -> None:
        self.test_client = test_client
        self.base_url = base_url
        self.gets = 0

    def post(self, url, json=None, timeout=None):
        return _Response(self.test_client.post(url[len(self.base_url):], json=json))

    def get(self, url, params=None, timeout=None):
        self.gets += 1
        return _Response(self.test_client.get(url[len(self.base_url):], query_string=params))


class SteppingClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


BASE_URL = "http://emailspy.test"


@pytest.fixture
def flask_session(client):
    return FlaskSession(client, BASE_URL)


@pytest.fixture
def stepping_clock():
    return SteppingClock()


def _client(flask_session, stepping_clock) -> EmailSpyClient:
    return EmailSpyClient(
        BASE_URL,
        session=flask_session,
        sleep=stepping_clock.sleep,
        clock=stepping_clock,
    )


def test_check_domain_returns_results(app, flask_session, stepping_clock, engine):
    spy = _client(flask_session, stepping_clock)
    callback_id = spy.start_check("example.com")

    result = {"domain": "example.com", "emails": [{"email": "a@example.com", "websites": ["example.com"]}]}
    app.test_client().post(f"/callback/{callback_id}", json=result)

    assert spy.wait_for_results(callback_id) == result
    assert stepping_clock.sleeps == [2]


def test_wait_gives_up_after_deadline(flask_session, stepping_clock):
    spy = _client(flask_session, stepping_clock)

    with pytest.raises(PollTimeout) as excinfo:
        spy.wait_for_results("never-finishes")

    assert str(excinfo.value) == "No results found within the time limit. Please try again."
    assert flask_session.gets == 60
    assert set(stepping_clock.sleeps) == {2}


def test_start_check_surfaces_server_error(flask_session, stepping_clock, engine):
    spy = _client(flask_session, stepping_clock)

    with pytest.raises(EmailCheckError, match="valid domain"):
        spy.start_check("not a domain")
    assert engine.calls == []


def test_get_status_wraps_transport_errors(stepping_clock):
    class BrokenSession:
        def get(self, *args, **kwargs):
            raise requests.ConnectionError("down")

    spy = EmailSpyClient(BASE_URL, session=BrokenSession(), sleep=stepping_clock.sleep, clock=stepping_clock)

    with pytest.raises(EmailCheckError, match="fetching email check status"):
        spy.get_status("abc")


def test_describe_results_handles_any_payload_shape():
    from check_domain import describe_results

    assert describe_results("example.com", ["unexpected", "list"]) == ["No public emails found for example.com"]
    assert describe_results("example.com", None) == ["No public emails found for example.com"]
    assert describe_results("example.com", {"emails": "oops"}) == ["No public emails found for example.com"]

    lines = describe_results(
        "example.com",
        {"emails": [{"email": "a@example.com", "websites": ["example.com"]}, "junk"]},
    )
    assert lines == ["✅ 1 emails found for example.com", "   a@example.com  (example.com)"]
