"""Tests for the request dispatcher: session state machine and exchange."""

import threading
from unittest.mock import PropertyMock, patch

import httpx
import pytest

from phpipam_client import client as client_mod
from phpipam_client.client import Client, SessionState
from phpipam_client.errors import APIError, AuthError, ProtocolError
from phpipam_client.session import Session, Token
from phpipam_client.types import Subnet

from conftest import AUTH_OK, EXPIRED_TOKEN, VALID_TOKEN

SUBNET_SEARCH_OK = {
    "code": 200,
    "success": True,
    "data": [
        {
            "id": "3",
            "subnet": "10.10.1.0",
            "mask": "24",
            "sectionId": "1",
            "description": "Customer 1",
            "firewallAddressObject": None,
            "vrfId": "0",
            "masterSubnetId": "2",
            "allowRequests": "1",
            "vlanId": "0",
            "showName": "1",
            "device": "0",
            "permissions": '{"3":"1","2":"2"}',
            "pingSubnet": "0",
            "discoverSubnet": "0",
            "DNSrecursive": "0",
            "DNSrecords": "0",
            "nameserverId": "0",
            "scanAgent": None,
            "isFolder": "0",
            "isFull": "0",
            "tag": "2",
            "editDate": None,
            "links": [{"rel": "self", "href": "/api/test/subnets/3/"}],
        }
    ],
}

SUBNET_SEARCH_ERROR = {"code": 404, "success": False, "message": "No subnets found"}
SUBNET_PATH = "/subnets/cidr/10.10.1.0/24/"


def _subnet_search(c: Client):
    return c.send_request("GET", SUBNET_PATH, response_type=list[Subnet])


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        (None, SessionState.UNAUTHENTICATED),
        (VALID_TOKEN, SessionState.AUTHENTICATED_VALID),
        (EXPIRED_TOKEN, SessionState.AUTHENTICATED_EXPIRED),
    ],
)
def test_state(make_session, token, expected):
    assert Client(make_session(token=token)).state is expected


def test_state_reads_token_once(make_session):
    """State is decided on one token snapshot even if the token changes."""
    sess = make_session()
    with patch.object(
        Session,
        "token",
        new_callable=PropertyMock,
        side_effect=[EXPIRED_TOKEN, Token()],
    ) as token_mock:
        state = Client(sess).state

    assert state is SessionState.AUTHENTICATED_EXPIRED
    assert token_mock.call_count == 1


def test_clients_share_session(make_session):
    sess = make_session()
    assert Client(sess).session is Client(sess).session


# ---------------------------------------------------------------------------
# Authentication before the request
# ---------------------------------------------------------------------------


def test_empty_token_logs_in_exactly_once(server, make_session):
    server.route("POST", "/user/", AUTH_OK)
    server.route("GET", SUBNET_PATH, SUBNET_SEARCH_OK)
    c = Client(make_session())

    _subnet_search(c)

    assert [r.method for r in server.requests] == ["POST", "GET"]
    assert len(server.calls("POST", "/user/")) == 1
    assert server.requests[1].headers["token"] == "foobarbazboop"


def test_expired_token_refreshes_exactly_once(server, make_session):
    server.route("PATCH", "/user/", AUTH_OK)
    server.route("GET", SUBNET_PATH, SUBNET_SEARCH_OK)
    c = Client(make_session(token=EXPIRED_TOKEN))

    _subnet_search(c)

    assert [r.method for r in server.requests] == ["PATCH", "GET"]
    assert c.state is SessionState.AUTHENTICATED_VALID


def test_valid_token_skips_authentication(server, session):
    server.route("GET", SUBNET_PATH, SUBNET_SEARCH_OK)

    _subnet_search(Client(session))

    assert [r.method for r in server.requests] == ["GET"]


def test_second_request_reuses_login(server, make_session):
    server.route("POST", "/user/", AUTH_OK)
    server.route("GET", SUBNET_PATH, SUBNET_SEARCH_OK)
    c = Client(make_session())

    _subnet_search(c)
    _subnet_search(c)

    assert len(server.calls("POST", "/user/")) == 1
    assert len(server.calls("GET", SUBNET_PATH)) == 2


def test_login_failure_is_wrapped(server, make_session):
    server.route(
        "POST",
        "/user/",
        {"code": 500, "success": False, "message": "Invalid username or password"},
        status=500,
    )
    c = Client(make_session())

    with pytest.raises(AuthError) as exc_info:
        _subnet_search(c)

    assert str(exc_info.value) == (
        "Error logging into API: Error from API (500): Invalid username or password"
    )
    assert isinstance(exc_info.value.__cause__, APIError)
    assert server.calls("GET", SUBNET_PATH) == []


def test_refresh_failure_is_wrapped(server, make_session):
    server.route(
        "PATCH",
        "/user/",
        {"code": 403, "success": False, "message": "Invalid token"},
        status=403,
    )
    c = Client(make_session(token=EXPIRED_TOKEN))

    with pytest.raises(AuthError) as exc_info:
        _subnet_search(c)

    assert str(exc_info.value) == (
        "Error refreshing session token: Error from API (403): Invalid token"
    )
    assert server.calls("GET", SUBNET_PATH) == []


def test_login_transport_failure_is_wrapped(server, make_session):
    def fail(request):
        raise httpx.ConnectError("connection refused", request=request)

    server.error = fail
    c = Client(make_session())

    with pytest.raises(AuthError, match="^Error logging into API: connection refused"):
        _subnet_search(c)


# ---------------------------------------------------------------------------
# Exchange and decoding
# ---------------------------------------------------------------------------


def test_send_request_decodes_records(server, session):
    server.route("GET", SUBNET_PATH, SUBNET_SEARCH_OK)

    subnets = _subnet_search(Client(session))

    assert len(subnets) == 1
    subnet = subnets[0]
    assert subnet.id == 3
    assert subnet.cidr == "10.10.1.0/24"
    assert subnet.allow_requests is True
    assert subnet.show_name is True
    assert subnet.is_full is False
    assert subnet.permissions == '{"3":"1","2":"2"}'
    assert subnet.tag == 2


def test_send_request_api_error_is_returned_unchanged(server, session):
    server.route("GET", SUBNET_PATH, SUBNET_SEARCH_ERROR, status=404)

    with pytest.raises(APIError) as exc_info:
        _subnet_search(Client(session))

    assert type(exc_info.value) is APIError
    assert str(exc_info.value) == "Error from API (404): No subnets found"


def test_send_request_without_data_returns_default(server, session):
    server.route("PATCH", "/sections/", {"code": 200, "success": True})
    default = object()

    result = Client(session).send_request(
        "PATCH", "/sections/", {"id": "3"}, response_type=str, default=default
    )

    assert result is default


def test_send_request_body_and_url(server, session):
    server.route("POST", "/vlans/", {"code": 201, "success": True, "data": "ok"})

    Client(session).send_request("post", "/vlans/", {"name": "foolan"})

    request = server.requests[0]
    assert request.method == "POST"
    assert request.url == "http://phpipam.test/api/0123456789abcdefgh/vlans/"
    assert request.headers["Content-Type"] == "application/json"
    assert server.json_body() == {"name": "foolan"}


def test_parameterless_request_sends_empty_object(server, session):
    server.route("GET", "/sections/", {"code": 200, "success": True, "data": []})

    Client(session).send_request("GET", "/sections/")

    assert server.json_body() == {}


def test_malformed_response_is_protocol_error(server, session):
    server.route("GET", "/sections/", "<html>502 Bad Gateway</html>", status=502)

    with pytest.raises(ProtocolError):
        Client(session).send_request("GET", "/sections/")


def test_transport_error_is_not_retried(server, session):
    def fail(request):
        raise httpx.ReadTimeout("timed out", request=request)

    server.error = fail

    with pytest.raises(httpx.ReadTimeout):
        Client(session).send_request("GET", "/sections/")

    assert len(server.requests) == 1


def test_api_error_is_not_retried(server, session):
    server.route("GET", SUBNET_PATH, SUBNET_SEARCH_ERROR, status=404)

    with pytest.raises(APIError):
        _subnet_search(Client(session))

    assert len(server.requests) == 1


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


def test_concurrent_callers_never_send_expired_token(server, make_session):
    """Racing callers may refresh redundantly but always use a fresh token."""
    server.route(
        "PATCH",
        "/user/",
        {
            "code": 200,
            "success": True,
            "data": {"token": "fresh", "expires": "2999-12-31 23:59:59"},
        },
    )
    server.route("GET", "/sections/", {"code": 200, "success": True, "data": []})
    sess = make_session(token=Token(value="stale", expires="1999-12-31 23:59:59"))
    thread_count = 8
    barrier = threading.Barrier(thread_count)
    errors = []

    def worker():
        barrier.wait()
        try:
            client_mod.Client(sess).send_request("GET", "/sections/")
        except Exception as err:  # noqa: BLE001
            errors.append(err)

    threads = [threading.Thread(target=worker) for _ in range(thread_count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    refreshes = server.calls("PATCH", "/user/")
    gets = server.calls("GET", "/sections/")
    assert 1 <= len(refreshes) <= thread_count
    assert len(gets) == thread_count
    assert all(r.headers["token"] == "fresh" for r in gets)
