r"""Configuration dataclass and defaults for AsyncHttpsClient.

This module provides configuration constants and the immutable
configuration object bound to an AsyncHttpsClient by
``setup_instance``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_TIMEOUT",
    "FORM_CONTENT_TYPE",
    "ClientConfig",
    "ReturnMode",
    "TlsIdentity",
    "default_validator",
]

import enum
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from areliable.core.validation import validate_timeout

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


# Default timeout in seconds when neither the client nor the settings
# provide one
DEFAULT_TIMEOUT = 60.0

# Content type forced on every form-encoded request
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class ReturnMode(enum.Enum):
    """Shape of the value returned by a successful request.

    ``DATA`` returns the decoded response body only, ``FULL`` returns the
    whole response envelope (status code, headers and body).
    """

    DATA = "data"
    FULL = "full"


def default_validator(status_code: int) -> bool:
    """Accept every status code below 400.

    Example:
        ```pycon
        >>> from areliable.core.config import default_validator
        >>> default_validator(204)
        True
        >>> default_validator(404)
        False

        ```
    """
    return status_code < 400


@dataclass(frozen=True)
class TlsIdentity:
    """Client certificate presented during the TLS handshake.

    Attributes:
        cert: Path to the PEM encoded certificate.
        key: Path to the PEM encoded private key.
        passphrase: Optional passphrase protecting the private key.
    """

    cert: str
    key: str
    passphrase: str | None = None


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for an AsyncHttpsClient instance.

    The configuration is immutable once created. Header and data mappings
    are copied into read-only views so later mutations of the caller's
    dictionaries do not leak into the client.

    Args:
        base_url: Optional prefix concatenated in front of every request URL.
        base_headers: Headers sent with every request. Request headers win
            on key collisions.
        base_data: Optional values merged into every query, JSON body and
            form that a request uses.
        default_timeout: Seconds before a request is abandoned. ``None``
            defers to the settings provider at setup time. Must be > 0.
        default_validator: Predicate deciding whether a status code is a
            success. Defaults to ``status < 400``.
        default_return_mode: Return shape used when a request does not
            override it.
        randomize_user_agent: Whether a random browser user agent is
            generated at setup time and added to the base headers.
        ignore_tls_errors: Whether TLS certificate verification is skipped.
        tls_identity: Optional client certificate for mutual TLS.

    Example:
        ```pycon
        >>> from areliable.core.config import ClientConfig, ReturnMode
        >>> config = ClientConfig(base_url="https://api.example.com")
        >>> config.default_return_mode
        <ReturnMode.DATA: 'data'>
        >>> merged = config.merge(default_timeout=5.0)
        >>> merged.default_timeout
        5.0
        >>> config.default_timeout is None
        True

        ```
    """

    base_url: str | None = None
    base_headers: Mapping[str, str] = field(default_factory=dict)
    base_data: Mapping[str, Any] | None = None
    default_timeout: float | None = None
    default_validator: Callable[[int], bool] = default_validator
    default_return_mode: ReturnMode = ReturnMode.DATA
    randomize_user_agent: bool = False
    ignore_tls_errors: bool = False
    tls_identity: TlsIdentity | None = None

    def __post_init__(self) -> None:
        """Validate and freeze configuration parameters.

        Raises:
            ValueError: If the default timeout is not positive.
        """
        validate_timeout(self.default_timeout)
        object.__setattr__(self, "base_headers", MappingProxyType(dict(self.base_headers)))
        if self.base_data is not None:
            object.__setattr__(self, "base_data", MappingProxyType(dict(self.base_data)))

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
