import pytest

from powerflex_client import PowerFlexClient, VersionState
from powerflex_client.authenticator import extract_version
from powerflex_client.exceptions import APIError, AuthenticationError, VersionError

ENDPOINT = "https://gw.example"
LOGIN_URL = f"{ENDPOINT}/api/login"
VERSION_URL = f"{ENDPOINT}/api/version"
UNAUTHORIZED = {"message": "Unauthorized", "httpStatusCode": 401, "errorCode": 0}
TOKEN = "012345678901234567890123456789"


def build_client(version: str | None = None) -> PowerFlexClient:
    return PowerFlexClient(endpoint=f"{ENDPOINT}/api", version=version)


def test_login_sends_basic_credentials_and_stores_token(requests_mock):
    client = build_client(version="4.0")
    matcher = requests_mock.get(LOGIN_URL, text=f'"{TOKEN}"')

    token = client.authenticate("ScaleIOUser", "password")

    assert token == TOKEN
    assert client.token == TOKEN
    assert matcher.last_request.headers["Authorization"].startswith("Basic ")
    assert client.session.credentials.username == "ScaleIOUser"


def test_bad_credentials_are_terminal(requests_mock):
    client = build_client(version="4.0")
    matcher = requests_mock.get(LOGIN_URL, status_code=401, json=UNAUTHORIZED)

    with pytest.raises(AuthenticationError) as excinfo:
        client.authenticate("ScaleIOUser", "badpassword")

    assert matcher.call_count == 1
    assert excinfo.value.http_status_code == 401
    assert client.token == ""
    assert client.session.credentials is None


def test_other_login_failures_are_plain_api_errors(requests_mock):
    client = build_client(version="4.0")
    requests_mock.get(
        LOGIN_URL,
        status_code=503,
        json={"message": "gateway busy", "httpStatusCode": 503, "errorCode": 0},
    )

    with pytest.raises(APIError) as excinfo:
        client.authenticate("ScaleIOUser", "password")

    assert not isinstance(excinfo.value, AuthenticationError)
    assert str(excinfo.value) == "gateway busy"


def test_authenticate_discovers_version_when_not_pinned(requests_mock):
    client = build_client()
    requests_mock.get(LOGIN_URL, text=f'"{TOKEN}"')
    version_matcher = requests_mock.get(VERSION_URL, text='"4.6.0.0"')

    assert client.session.version_state is VersionState.UNKNOWN
    client.authenticate("ScaleIOUser", "password")

    assert client.session.version_state is VersionState.RESOLVED
    assert client.version == "4.6"
    assert version_matcher.call_count == 1


def test_pinned_version_skips_discovery(requests_mock):
    client = build_client(version="3.5")
    requests_mock.get(LOGIN_URL, text=f'"{TOKEN}"')
    version_matcher = requests_mock.get(VERSION_URL, text='"4.6"')

    client.authenticate("ScaleIOUser", "password")

    assert version_matcher.call_count == 0
    assert client.version == "3.5"


def test_version_reads_are_cached_between_logins(requests_mock):
    client = build_client()
    requests_mock.get(LOGIN_URL, text=f'"{TOKEN}"')
    version_matcher = requests_mock.get(VERSION_URL, text='"4.0"')
    client.authenticate("ScaleIOUser", "password")

    for _ in range(3):
        assert client.get_version() == "4.0"

    assert version_matcher.call_count == 1


def test_version_is_carried_over_on_reauthentication(requests_mock):
    client = build_client()
    login_matcher = requests_mock.get(LOGIN_URL, text=f'"{TOKEN}"')
    version_matcher = requests_mock.get(VERSION_URL, text='"4.0"')

    client.authenticate("ScaleIOUser", "password")
    client.authenticate("ScaleIOUser", "password")

    assert login_matcher.call_count == 2
    assert version_matcher.call_count == 1


def test_version_discovery_failure_fails_authentication(requests_mock):
    client = build_client()
    requests_mock.get(LOGIN_URL, text=f'"{TOKEN}"')
    requests_mock.get(VERSION_URL, status_code=400, json={"message": "nope"})

    with pytest.raises(VersionError):
        client.authenticate("ScaleIOUser", "password")


def test_refresh_recovers_from_expired_token(requests_mock):
    client = build_client(version="4.0")
    login_matcher = requests_mock.get(LOGIN_URL, [{"text": '"tok-1"'}, {"text": '"tok-2"'}])
    version_matcher = requests_mock.get(
        VERSION_URL,
        [{"status_code": 401, "json": UNAUTHORIZED}, {"text": '"4.5"'}],
    )
    client.authenticate("ScaleIOUser", "password")

    assert client.get_version(refresh=True) == "4.5"
    assert version_matcher.call_count == 2
    assert login_matcher.call_count == 2
    assert client.version == "4.5"


def test_malformed_pinned_version_is_rejected(requests_mock):
    client = build_client(version="malformed")
    requests_mock.get(f"{ENDPOINT}/api/types/System/instances", json=[])

    with pytest.raises(VersionError):
        client.execute("GET", "/api/types/System/instances")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("4.6.0.0", "4.6"),
        ("3.5", "3.5"),
        ("10.25.1-RC2", "10.25"),
        ("malformed", "malformed"),
        ("R4_5.2000.0", "R4_5.2000.0"),
    ],
)
def test_extract_version(raw, expected):
    assert extract_version(raw) == expected
