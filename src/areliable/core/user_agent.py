r"""Random desktop browser user agents.

A client configured with ``randomize_user_agent=True`` calls
``generate_user_agent`` once at setup time, so every request of that
client sends the same value.
"""

from __future__ import annotations

__all__ = ["generate_user_agent"]

import random

_PLATFORMS = (
    "Windows NT 10.0; Win64; x64",
    "Macintosh; Intel Mac OS X 10_15_7",
    "X11; Linux x86_64",
)


def _chrome(platform: str, rng: random.Random) -> str:
    major = rng.randint(118, 131)
    return (
        f"Mozilla/5.0 ({platform}) AppleWebKit/537.36 (KHTML, like Gecko) "
        f"Chrome/{major}.0.0.0 Safari/537.36"
    )


def _edge(platform: str, rng: random.Random) -> str:
    major = rng.randint(118, 131)
    return f"{_chrome(platform, rng)} Edg/{major}.0.0.0"


def _firefox(platform: str, rng: random.Random) -> str:
    major = rng.randint(115, 133)
    platform = platform.replace("Intel Mac OS X 10_15_7", "Intel Mac OS X 10.15")
    return f"Mozilla/5.0 ({platform}; rv:{major}.0) Gecko/20100101 Firefox/{major}.0"


_BROWSERS = (_chrome, _chrome, _edge, _firefox)


def generate_user_agent(rng: random.Random | None = None) -> str:
    """Generate a realistic desktop browser user agent string.

    Args:
        rng: Optional random generator, mostly useful to get
            reproducible values in tests.

    Returns:
        A user agent string.

    Example:
        ```pycon
        >>> from areliable.core.user_agent import generate_user_agent
        >>> generate_user_agent().startswith("Mozilla/5.0 (")
        True

        ```
    """
    rng = rng or random.Random()  # noqa: S311
    platform = rng.choice(_PLATFORMS)
    return rng.choice(_BROWSERS)(platform, rng)
