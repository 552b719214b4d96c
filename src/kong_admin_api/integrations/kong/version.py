"""Kong version parsing.

Kong reports versions such as ``0.11.2``, ``0.13.0rc1``,
``1.4.0-enterprise-edition`` or ``2.8.1.0``. Only the numeric
``major.minor.patch`` core takes part in comparisons.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_VERSION_RE = re.compile(r"^\s*v?(\d+)\.(\d+)(?:\.(\d+))?")


@dataclass(frozen=True, order=True)
class KongVersion:
    """Comparable Kong version.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number (0 when absent).
        raw: The version string as reported by Kong.
    """

    major: int
    minor: int
    patch: int = 0
    raw: str = field(default="", compare=False)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(text: str) -> KongVersion:
    """Parse a Kong version string.

    Args:
        text: Version string from the Admin API root endpoint.

    Returns:
        The parsed version.

    Raises:
        ValueError: If the string has no ``major.minor`` prefix.
    """
    match = _VERSION_RE.match(text or "")
    if not match:
        raise ValueError(f"Invalid Kong version: {text!r}")
    major, minor, patch = match.groups()
    return KongVersion(int(major), int(minor), int(patch or 0), raw=text)
