r"""Core configuration, validation and request composition."""

from __future__ import annotations

__all__ = [
    "DEFAULT_TIMEOUT",
    "FORM_CONTENT_TYPE",
    "ClientConfig",
    "RequestDescriptor",
    "ResolvedRequest",
    "ReturnMode",
    "TlsIdentity",
    "compose",
    "default_validator",
    "generate_user_agent",
    "validate_retry_params",
    "validate_timeout",
]

from areliable.core.composer import RequestDescriptor, ResolvedRequest, compose
from areliable.core.config import (
    DEFAULT_TIMEOUT,
    FORM_CONTENT_TYPE,
    ClientConfig,
    ReturnMode,
    TlsIdentity,
    default_validator,
)
from areliable.core.user_agent import generate_user_agent
from areliable.core.validation import validate_retry_params, validate_timeout
