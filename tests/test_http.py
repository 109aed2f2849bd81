import pytest
import requests

from powerflex_client.exceptions import (
    APIError,
    BodyReadError,
    UnauthorizedError,
    UnexpectedResponseError,
)
from powerflex_client.http import decode_json, decode_scalar, dump_request, parse_error


class FailingRaw:
    def __init__(self):
        self.closed = False

    def read(self, *args, **kwargs):
        raise OSError("connection reset by peer")

    def close(self):
        self.closed = True


def make_response(body: bytes, *, status: int = 200, reason: str | None = None):
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response._content = body
    response._content_consumed = True
    return response


def test_decode_scalar_strips_whitespace_and_quotes():
    assert decode_scalar(make_response(b'"2.0"\n')) == "2.0"


def test_decode_scalar_strips_a_single_layer_of_quotes():
    assert decode_scalar(make_response(b'  ""nested""  ')) == '"nested"'


def test_decode_scalar_leaves_json_documents_alone():
    assert decode_scalar(make_response(b'{"message":"success"}')) == '{"message":"success"}'


def test_decode_scalar_reports_body_read_failure():
    response = requests.Response()
    response.status_code = 200
    response.raw = FailingRaw()

    with pytest.raises(BodyReadError):
        decode_scalar(response)

    assert response.raw.closed


def test_decode_json_rejects_malformed_body():
    with pytest.raises(UnexpectedResponseError):
        decode_json(make_response(b"{Bad response}"))


def test_parse_error_reads_structured_body():
    error = parse_error(
        make_response(
            b'{"message":"bad request","httpStatusCode":400,"errorCode":7}',
            status=400,
            reason="Bad Request",
        )
    )

    assert type(error) is APIError
    assert str(error) == "bad request"
    assert error.http_status_code == 400
    assert error.error_code == 7


def test_parse_error_tags_unauthorized():
    error = parse_error(make_response(b'{"message":"Unauthorized"}', status=401))

    assert isinstance(error, UnauthorizedError)
    assert error.http_status_code == 401


def test_parse_error_synthesizes_generic_error_for_html():
    error = parse_error(
        make_response(b"<html><body>Bad Request</body></html>", status=400, reason="Bad Request")
    )

    assert str(error) == "Bad Request"
    assert error.status_code == 400
    assert error.error_code is None


def test_parse_error_without_reason_or_body():
    error = parse_error(make_response(b"", status=503))

    assert str(error) == "unparseable error response"
    assert error.status_code == 503


def test_parse_error_prefers_detail_message():
    error = parse_error(
        make_response(
            b'{"message":"Error with details","httpStatusCode":500,"errorCode":0,'
            b'"details":[{"error":"X","rc":1,"errorMessage":"volume is mapped"}]}',
            status=500,
        )
    )

    assert str(error) == "volume is mapped"


def test_dump_request_redacts_authorization_and_skips_octet_bodies():
    prepared = requests.Request(
        "POST",
        "https://gw.example/api/upload",
        headers={"Authorization": "Bearer abc", "Content-Type": "application/octet-stream"},
        data=b"\x00\x01",
    ).prepare()

    dumped = dump_request(prepared)

    assert "POST https://gw.example/api/upload" in dumped
    assert "Authorization: ******" in dumped
    assert "abc" not in dumped
    assert "\x00" not in dumped
