r"""Unit tests for the request composer."""

from __future__ import annotations

from urllib.parse import parse_qsl

import pytest
from coola.equality import objects_are_equal

from areliable.core.composer import (
    RequestDescriptor,
    ResolvedRequest,
    compose,
    encode_form,
    render_url,
)
from areliable.core.config import FORM_CONTENT_TYPE, ClientConfig

#############################
#     Tests for compose     #
#############################


@pytest.mark.parametrize(
    ("base_url", "url", "expected"),
    [
        ("https://api.example.com", "/users", "https://api.example.com/users"),
        ("https://api.example.com/", "/users", "https://api.example.com//users"),
        ("https://api.example.com", "users", "https://api.example.comusers"),
        ("https://api.example.com/v1", "", "https://api.example.com/v1"),
    ],
)
def test_compose_concatenates_base_url(base_url: str, url: str, expected: str) -> None:
    """Test that the base URL is prepended without slash normalization."""
    request = compose(RequestDescriptor(method="GET", url=url), ClientConfig(base_url=base_url), 1.0)
    assert request.url == expected


def test_compose_without_base_url() -> None:
    request = compose(
        RequestDescriptor(method="GET", url="https://other.example.com/x"), ClientConfig(), 1.0
    )
    assert request.url == "https://other.example.com/x"


def test_compose_sets_method_and_timeout() -> None:
    request = compose(RequestDescriptor(method="post", url="/x"), ClientConfig(), 2.5)
    assert request.method == "POST"
    assert request.timeout == 2.5


def test_compose_merges_headers() -> None:
    config = ClientConfig(base_headers={"x-app": "demo", "accept": "text/plain"})
    request = compose(
        RequestDescriptor(method="GET", url="/x", headers={"accept": "application/json"}),
        config,
        1.0,
    )
    assert objects_are_equal(request.headers, {"x-app": "demo", "accept": "application/json"})


def test_compose_without_base_data_keeps_channels() -> None:
    request = compose(
        RequestDescriptor(method="POST", url="/x", params={"page": 1}, json={"a": 1}),
        ClientConfig(),
        1.0,
    )
    assert objects_are_equal(request.params, {"page": 1})
    assert objects_are_equal(request.json, {"a": 1})
    assert request.form is None
    assert request.content is None


def test_compose_merges_base_data_into_used_channels_only() -> None:
    config = ClientConfig(base_data={"api_key": "secret", "lang": "en"})
    request = compose(
        RequestDescriptor(method="POST", url="/x", params={"lang": "fr"}, json={"name": "Jane"}),
        config,
        1.0,
    )
    assert objects_are_equal(request.params, {"api_key": "secret", "lang": "fr"})
    assert objects_are_equal(request.json, {"api_key": "secret", "lang": "en", "name": "Jane"})
    assert request.form is None


def test_compose_base_data_ignored_without_channels() -> None:
    request = compose(
        RequestDescriptor(method="GET", url="/x"), ClientConfig(base_data={"api_key": "s"}), 1.0
    )
    assert request.params is None
    assert request.json is None
    assert request.form is None


def test_compose_base_data_leaves_non_mapping_json() -> None:
    request = compose(
        RequestDescriptor(method="POST", url="/x", json=[1, 2]),
        ClientConfig(base_data={"api_key": "s"}),
        1.0,
    )
    assert request.json == [1, 2]


def test_compose_form_is_url_encoded() -> None:
    request = compose(
        RequestDescriptor(method="POST", url="/login", form={"user": "jane doe", "pin": 1234}),
        ClientConfig(),
        1.0,
    )
    assert request.content == "user=jane+doe&pin=1234"
    assert request.headers["content-type"] == FORM_CONTENT_TYPE
    assert request.json is None


@pytest.mark.parametrize("header", ["content-type", "Content-Type", "CONTENT-TYPE"])
def test_compose_form_overrides_content_type(header: str) -> None:
    request = compose(
        RequestDescriptor(
            method="POST", url="/x", form={"a": "b"}, headers={header: "application/json"}
        ),
        ClientConfig(base_headers={"Content-Type": "text/plain"}),
        1.0,
    )
    content_types = [v for k, v in request.headers.items() if k.lower() == "content-type"]
    assert content_types == [FORM_CONTENT_TYPE]


def test_compose_form_wins_over_json() -> None:
    request = compose(
        RequestDescriptor(method="POST", url="/x", json={"a": 1}, form={"b": 2}),
        ClientConfig(base_data={"c": 3}),
        1.0,
    )
    assert request.json is None
    assert objects_are_equal(request.form, {"c": 3, "b": 2})
    assert request.content == "c=3&b=2"


def test_compose_replacements() -> None:
    request = compose(
        RequestDescriptor(
            method="GET",
            url="/users/:id/files/:name",
            replacements={"id": 42, "name": "a b/c", "unused": "x"},
        ),
        ClientConfig(base_url="https://api.example.com"),
        1.0,
    )
    assert request.url == "https://api.example.com/users/42/files/a%20b%2Fc"


def test_compose_replacements_in_base_url() -> None:
    request = compose(
        RequestDescriptor(method="GET", url="/items", replacements={"tenant": "acme"}),
        ClientConfig(base_url="https://api.example.com/:tenant"),
        1.0,
    )
    assert request.url == "https://api.example.com/acme/items"


def test_compose_is_idempotent() -> None:
    """Test that identical inputs give equal requests and inputs are not
    mutated."""
    config = ClientConfig(
        base_url="https://api.example.com",
        base_headers={"user-agent": "fixed"},
        base_data={"k": "v"},
    )
    descriptor = RequestDescriptor(
        method="POST",
        url="/users/:id",
        params={"q": "x"},
        form={"a": 1},
        headers={"x-trace": "1"},
        replacements={"id": 7},
    )
    first = compose(descriptor, config, 3.0)
    second = compose(descriptor, config, 3.0)

    assert first == second
    assert objects_are_equal(dict(descriptor.headers), {"x-trace": "1"})
    assert objects_are_equal(dict(descriptor.form), {"a": 1})
    assert descriptor.url == "/users/:id"
    assert dict(config.base_headers) == {"user-agent": "fixed"}


def test_compose_returns_resolved_request() -> None:
    request = compose(RequestDescriptor(method="GET", url="/x"), ClientConfig(), 1.0)
    assert request == ResolvedRequest(method="GET", url="/x", timeout=1.0, headers={})


################################
#     Tests for render_url     #
################################


def test_render_url_replaces_every_occurrence() -> None:
    assert render_url("/:id/:id", {"id": 1}) == "/1/1"


def test_render_url_ignores_unknown_keys() -> None:
    assert render_url("/users", {"id": 1}) == "/users"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("plain", "plain"),
        ("a b", "a%20b"),
        ("a/b?c=d&e", "a%2Fb%3Fc%3Dd%26e"),
        ("-_.!~*'()", "-_.!~*'()"),
        ("café", "caf%C3%A9"),
        (True, "true"),
        (False, "false"),
        (42, "42"),
    ],
)
def test_render_url_percent_encodes(value: object, expected: str) -> None:
    assert render_url("/x/:v", {"v": value}) == f"/x/{expected}"


#################################
#     Tests for encode_form     #
#################################


def test_encode_form() -> None:
    assert encode_form({"name": "Jane Doe", "tags": ["a", "b"]}) == "name=Jane+Doe&tags=a&tags=b"


def test_encode_form_empty() -> None:
    assert encode_form({}) == ""


def test_encode_form_scalars() -> None:
    assert parse_qsl(encode_form({"n": None, "t": True, "f": False, "i": 3}), keep_blank_values=True) == [
        ("n", ""),
        ("t", "true"),
        ("f", "false"),
        ("i", "3"),
    ]


def test_encode_form_nested_mapping() -> None:
    assert parse_qsl(encode_form({"a": {"b": 1, "c": {"d": "x y"}}})) == [
        ("a[b]", "1"),
        ("a[c][d]", "x y"),
    ]


def test_encode_form_list_of_mappings() -> None:
    assert parse_qsl(encode_form({"items": [{"id": 1}, {"id": 2}]})) == [
        ("items[0][id]", "1"),
        ("items[1][id]", "2"),
    ]


def test_compose_nested_form_is_flattened() -> None:
    request = compose(
        RequestDescriptor(method="POST", url="/x", form={"a": {"b": 1}, "t": True}),
        ClientConfig(),
        timeout=1.0,
    )
    assert parse_qsl(request.content) == [("a[b]", "1"), ("t", "true")]
