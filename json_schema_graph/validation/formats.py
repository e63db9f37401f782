"""
Format checker registry.

A named, open set of checkers for the ``format`` keyword. The engine ships
defaults; hosts may register new names or override existing ones. Names
without a checker are skipped during validation.
"""

from __future__ import annotations

import base64
import binascii
import ipaddress
import re
from collections.abc import Callable, Iterator, Mapping
from datetime import date, datetime, time
from urllib.parse import urlparse

FormatChecker = Callable[[str], bool]

_GUID_PATTERN = re.compile(r"[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}")
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATE_TIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?([Zz]|[+-]\d{2}:?\d{2})?$")
_TIME_PATTERN = re.compile(r"^\d{2}:\d{2}(:\d{2}(\.\d+)?)?([Zz]|[+-]\d{2}:\d{2})?$")
_DURATION_PATTERN = re.compile(r"^P(?!$)(\d+Y)?(\d+M)?(\d+W)?(\d+D)?(T(?=\d)(\d+H)?(\d+M)?(\d+(\.\d+)?S)?)?$")
_TIME_SPAN_PATTERN = re.compile(r"^-?(\d+\.)?\d{1,2}:\d{2}(:\d{2}(\.\d{1,7})?)?$")
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_HOSTNAME_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")


def check_guid(value: str) -> bool:
    """Canonical 8-4-4-4-12 hex form only (no braces, URN prefix or bare hex)."""
    return _GUID_PATTERN.fullmatch(value) is not None


def check_date_time(value: str) -> bool:
    if not _DATE_TIME_PATTERN.match(value):
        return False
    try:
        datetime.fromisoformat(value.upper())
    except ValueError:
        return False
    return True


def check_date(value: str) -> bool:
    if not _DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def check_time(value: str) -> bool:
    if not _TIME_PATTERN.match(value):
        return False
    try:
        time.fromisoformat(value.upper())
    except ValueError:
        return False
    return True


def check_duration(value: str) -> bool:
    return _DURATION_PATTERN.match(value) is not None


def check_time_span(value: str) -> bool:
    return _TIME_SPAN_PATTERN.match(value) is not None


def check_email(value: str) -> bool:
    return _EMAIL_PATTERN.match(value) is not None


def check_hostname(value: str) -> bool:
    hostname = value[:-1] if value.endswith(".") else value
    if not hostname or len(hostname) > 253:
        return False
    return all(_HOSTNAME_LABEL.match(label) for label in hostname.split("."))


def check_ipv4(value: str) -> bool:
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def check_ipv6(value: str) -> bool:
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return True


def check_uri(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme) and (bool(parsed.netloc) or bool(parsed.path))


def check_base64(value: str) -> bool:
    try:
        base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def check_double(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def _integer_checker(bits: int) -> FormatChecker:
    low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1

    def check(value: str) -> bool:
        try:
            number = int(value)
        except ValueError:
            return False
        return low <= number <= high

    return check


DEFAULT_FORMAT_CHECKERS: dict[str, FormatChecker] = {
    "guid": check_guid,
    "uuid": check_guid,
    "date-time": check_date_time,
    "date": check_date,
    "time": check_time,
    "duration": check_duration,
    "time-span": check_time_span,
    "email": check_email,
    "hostname": check_hostname,
    "ipv4": check_ipv4,
    "ipv6": check_ipv6,
    "uri": check_uri,
    "byte": check_base64,
    "base64": check_base64,
    "double": check_double,
    "float": check_double,
    "int32": _integer_checker(32),
    "int64": _integer_checker(64),
}


class FormatCheckerRegistry:
    """Named set of format checkers.

    Reads are safe from several threads; register/unregister while
    validations run are not.
    """

    def __init__(self, checkers: Mapping[str, FormatChecker] | None = None):
        self._checkers: dict[str, FormatChecker] = dict(checkers or {})

    def register(self, name: str, checker: FormatChecker) -> None:
        """Add a checker, replacing any existing checker of the same name."""
        self._checkers[name] = checker

    def unregister(self, name: str) -> None:
        """Remove a checker; unknown names are ignored."""
        self._checkers.pop(name, None)

    def get(self, name: str) -> FormatChecker | None:
        return self._checkers.get(name)

    def check(self, name: str, value: str) -> bool | None:
        """
        Run the checker registered under ``name``.

        Returns:
            True/False, or None when no checker is registered
        """
        checker = self._checkers.get(name)
        if checker is None:
            return None
        return bool(checker(value))

    def copy(self) -> FormatCheckerRegistry:
        return FormatCheckerRegistry(self._checkers)

    def names(self) -> list[str]:
        return sorted(self._checkers)

    def __contains__(self, name: object) -> bool:
        return name in self._checkers

    def __iter__(self) -> Iterator[str]:
        return iter(self._checkers)

    def __len__(self) -> int:
        return len(self._checkers)


def default_format_checkers() -> FormatCheckerRegistry:
    """A fresh registry holding the built-in checkers."""
    return FormatCheckerRegistry(DEFAULT_FORMAT_CHECKERS)
