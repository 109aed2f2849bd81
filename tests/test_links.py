import pytest

from powerflex_client import Link, resolve_link
from powerflex_client.exceptions import LinkNotFoundError, RequestError


def test_empty_links_raise_not_found():
    with pytest.raises(LinkNotFoundError) as excinfo:
        resolve_link([], "self")

    assert excinfo.value.rel == "self"
    assert not isinstance(excinfo.value, RequestError)


def test_first_match_wins():
    links = [Link(rel="self", href="X"), Link(rel="self", href="Y")]

    assert resolve_link(links, "self") == Link(rel="self", href="X")


def test_relation_match_is_case_sensitive():
    with pytest.raises(LinkNotFoundError):
        resolve_link([{"rel": "Self", "href": "X"}], "self")


def test_raw_payload_links_are_accepted_and_not_mutated():
    links = [
        {"rel": "self", "href": "/api/instances/System::1"},
        {"rel": "/api/System/relationship/Statistics", "href": "/api/instances/System::1/stats"},
    ]
    snapshot = [dict(link) for link in links]

    link = resolve_link(links, "/api/System/relationship/Statistics")

    assert link.href == "/api/instances/System::1/stats"
    assert links == snapshot
