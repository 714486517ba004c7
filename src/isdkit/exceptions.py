"""Custom exceptions for isdkit."""

from __future__ import annotations

from typing import Any


class IsdKitError(Exception):
    """Base exception for all isdkit errors."""

    pass


class InvalidArgumentError(IsdKitError, ValueError):
    """Raised when a search argument cannot be interpreted.

    Attributes:
        argument: Name of the offending argument (e.g. ``"end_year"``).
        value: The value that was rejected.
    """

    def __init__(self, argument: str, value: Any, expected: str | None = None) -> None:
        self.argument = argument
        self.value = value
        msg = f"Invalid value for '{argument}': {value!r}"
        if expected:
            msg += f"\nExpected {expected}."
        super().__init__(msg)


class SourceUnavailableError(IsdKitError):
    """Raised when the station registry cannot be retrieved or is malformed.

    A degraded response (for example a one-column error page served while the
    NOAA archive is down) is reported the same way as a network failure.

    Attributes:
        url: The registry location that was requested, if known.
        reason: Short description of what went wrong.
    """

    def __init__(self, reason: str, *, url: str | None = None) -> None:
        self.reason = reason
        self.url = url
        msg = "Station registry not available"
        if url:
            msg += f" from {url}"
        msg += f": {reason}"
        if url:
            base = url.rsplit("/", maxsplit=1)[0]
            msg += f"\nCheck {base}/ for potential server problems."
        super().__init__(msg)
