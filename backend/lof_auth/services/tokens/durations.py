# lof_auth/services/tokens/durations.py
from __future__ import annotations

import logging
import re

log = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"^(\d+)([smhd])$")

_UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
}

DEFAULT_ACCESS_SECONDS = 15 * 60
DEFAULT_REFRESH_SECONDS = 7 * 24 * 60 * 60


def parse_duration(
    value: str | None,
    *,
    default: int = DEFAULT_ACCESS_SECONDS,
    setting: str | None = None,
) -> int:
    """
    Convert a compact duration string into whole seconds.

    Accepted shape is ``<digits><unit>`` with unit one of ``s``, ``m``, ``h``
    or ``d`` (``"15m"`` -> 900, ``"7d"`` -> 604800). Anything else, zero
    amounts included, is logged and replaced by ``default``.

    :param value: Raw duration string, usually read from the environment.
    :param default: Fallback in seconds for malformed or missing values.
    :param setting: Name of the setting being parsed, used in the warning.
    :returns: Duration in seconds.
    :rtype: int
    """
    raw = value.strip() if isinstance(value, str) else ""
    match = _DURATION_RE.match(raw)
    seconds = int(match.group(1)) * _UNIT_SECONDS[match.group(2)] if match else 0
    # A zero lifetime would sign tokens without ``exp``
    if seconds <= 0:
        log.warning(
            "Invalid duration %r for %s, falling back to %ss",
            value,
            setting or "duration",
            default,
        )
        return default
    return seconds
