r"""Composition of logical requests into transport-ready requests.

``compose`` merges a per-call ``RequestDescriptor`` with the client's
``ClientConfig``. It is a pure function: the descriptor and the
configuration are never mutated and identical inputs always give equal
results.
"""

from __future__ import annotations

__all__ = ["RequestDescriptor", "ResolvedRequest", "compose", "encode_form", "render_url"]

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from areliable.core.config import FORM_CONTENT_TYPE

if TYPE_CHECKING:
    from collections.abc import Callable

    from areliable.core.config import ClientConfig, ReturnMode

# Characters left untouched by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class RequestDescriptor:
    """Logical description of a single HTTP call.

    Attributes:
        method: HTTP method name (e.g. ``"GET"``).
        url: Relative path appended to the base URL, or an absolute URL
            when the client has no base URL.
        params: Optional query string parameters.
        json: Optional JSON-serializable body.
        form: Optional form fields, sent URL-encoded.
        headers: Optional headers, merged over the base headers.
        replacements: Optional URL template variables. Every ``:key`` in
            the URL is replaced by the percent-encoded value.
        timeout: Optional timeout override in seconds.
        validator: Optional status validator override.
        return_mode: Optional return shape override.
    """

    method: str
    url: str
    params: Mapping[str, Any] | None = None
    json: Any = None
    form: Mapping[str, Any] | None = None
    headers: Mapping[str, str] | None = None
    replacements: Mapping[str, Any] | None = None
    timeout: float | None = None
    validator: Callable[[int], bool] | None = None
    return_mode: ReturnMode | None = None


@dataclass(frozen=True)
class ResolvedRequest:
    """Request ready to be handed to the transport.

    Attributes:
        method: HTTP method name.
        url: Absolute URL with template variables substituted.
        timeout: Effective timeout in seconds.
        headers: Merged headers.
        params: Merged query parameters.
        json: Merged JSON body. Always ``None`` when ``content`` is set.
        form: Merged form fields, kept for debugging.
        content: URL-encoded form body.
    """

    method: str
    url: str
    timeout: float
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] | None = None
    json: Any = None
    form: dict[str, Any] | None = None
    content: str | None = None


def _merge(base: Mapping[str, Any] | None, values: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if values is None:
        return None
    if base is None:
        return dict(values)
    return {**base, **values}


def _flatten_form(key: str, value: Any, items: list[tuple[str, Any]]) -> None:
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            _flatten_form(f"{key}[{sub_key}]", sub_value, items)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            if isinstance(item, (Mapping, list, tuple)):
                _flatten_form(f"{key}[{index}]", item, items)
            else:
                items.append((key, item))
    else:
        items.append((key, value))


def encode_form(form: Mapping[str, Any]) -> str:
    """Serialize form fields into an ``application/x-www-form-urlencoded``
    string.

    Nested mappings are flattened with bracket keys (``a[b]=1``) and
    lists of scalars repeat their key. Lists holding mappings or lists
    are indexed (``a[0][b]=1``). ``None`` is sent as an empty value and
    booleans as ``true``/``false``.

    Example:
        ```pycon
        >>> from areliable.core.composer import encode_form
        >>> encode_form({"name": "Jane Doe", "tags": ["a", "b"]})
        'name=Jane+Doe&tags=a&tags=b'

        ```
    """
    items: list[tuple[str, Any]] = []
    for key, value in form.items():
        _flatten_form(str(key), value, items)
    return str(httpx.QueryParams(items))


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_url(url: str, replacements: Mapping[str, Any]) -> str:
    """Replace every ``:key`` marker of ``url`` with its percent-encoded
    value.

    Keys that do not appear in the URL are ignored.

    Example:
        ```pycon
        >>> from areliable.core.composer import render_url
        >>> render_url("/users/:id/files/:name", {"id": 7, "name": "a b/c"})
        '/users/7/files/a%20b%2Fc'

        ```
    """
    for key, value in replacements.items():
        url = url.replace(f":{key}", quote(_to_text(value), safe=_URI_COMPONENT_SAFE))
    return url


def compose(
    descriptor: RequestDescriptor,
    config: ClientConfig,
    timeout: float,
) -> ResolvedRequest:
    """Merge a request descriptor with the client configuration.

    Rules:
    - URL: ``config.base_url + descriptor.url`` when a base URL is set,
      without any slash normalization.
    - Headers: base headers overridden by the descriptor headers.
    - Base data is merged into each of params, json and form that the
      descriptor uses. Descriptor values win on collisions.
    - Forms are URL-encoded into ``content`` and force the
      ``content-type`` header to ``application/x-www-form-urlencoded``.
    - URL template variables are substituted after the base URL is
      prepended, so markers may live in either part.

    Args:
        descriptor: The per-call request description.
        config: The client configuration.
        timeout: The effective timeout in seconds.

    Returns:
        The resolved request.

    Example:
        ```pycon
        >>> from areliable.core.composer import RequestDescriptor, compose
        >>> from areliable.core.config import ClientConfig
        >>> config = ClientConfig(base_url="https://api.example.com", base_headers={"x-app": "demo"})
        >>> request = compose(
        ...     RequestDescriptor(method="GET", url="/users/:id", replacements={"id": 42}),
        ...     config,
        ...     timeout=5.0,
        ... )
        >>> request.url
        'https://api.example.com/users/42'
        >>> request.headers
        {'x-app': 'demo'}

        ```
    """
    url = f"{config.base_url}{descriptor.url}" if config.base_url else descriptor.url
    headers = {**config.base_headers, **(descriptor.headers or {})}

    params = _merge(config.base_data, descriptor.params)
    form = _merge(config.base_data, descriptor.form)
    json = descriptor.json
    if json is not None and config.base_data is not None and isinstance(json, dict):
        json = {**config.base_data, **json}

    content = None
    if form is not None:
        # Header names are case-insensitive, drop any caller spelling first
        headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}
        headers["content-type"] = FORM_CONTENT_TYPE
        content = encode_form(form)
        json = None

    if descriptor.replacements:
        url = render_url(url, descriptor.replacements)

    return ResolvedRequest(
        method=descriptor.method.upper(),
        url=url,
        timeout=timeout,
        headers=headers,
        params=params,
        json=json,
        form=form,
        content=content,
    )
