from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Union,
)

__all__ = (
    "Headers",
    "Vary",
    "CacheControl",
    "parse_cache_control",
)

VARY_SEPARATOR = re.compile(r"[\s,]+")


class Headers(MutableMapping[str, str]):
    """
    Case-insensitive multi-map of header names to the list of their values.

    Names are kept lowercase. Item access joins multiple values with ``", "``,
    while :meth:`get_list` exposes the raw list (``None`` when the header is absent).
    Assigning an item appends a value; use :meth:`set` to replace all values.
    """

    def __init__(self, headers: Optional[Mapping[str, Union[str, List[str]]]] = None) -> None:
        if isinstance(headers, Headers):
            headers = headers._headers
        self._headers: Dict[str, List[str]] = {}
        for key, value in (headers or {}).items():
            values = [value] if isinstance(value, str) else [str(v) for v in value]
            self._headers.setdefault(key.lower(), []).extend(values)

    def get_list(self, key: str) -> Optional[List[str]]:
        return self._headers.get(key.lower(), None)

    def set(self, key: str, value: str) -> None:
        self._headers[key.lower()] = [value]

    def copy(self) -> "Headers":
        return Headers(self._headers)

    def __getitem__(self, key: str) -> str:
        return ", ".join(self._headers[key.lower()])

    def __setitem__(self, key: str, value: str) -> None:
        self._headers.setdefault(key.lower(), []).append(value)

    def __delitem__(self, key: str) -> None:
        del self._headers[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._headers

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return f"Headers({self._headers!r})"

    def __eq__(self, other_headers: Any) -> bool:
        return isinstance(other_headers, Headers) and self._headers == other_headers._headers


class Vary:
    def __init__(self, values: List[str]) -> None:
        self.values = values

    @classmethod
    def from_value(cls, vary_value: str) -> "Vary":
        """
        Split a Vary value into normalized field names.

        Names are separated by commas and/or whitespace, lowercased, and have
        underscores turned into hyphens, so ``"Accept_Language, Cookie"`` yields
        ``["accept-language", "cookie"]``.
        """
        values = []

        for field_name in VARY_SEPARATOR.split(vary_value.strip()):
            if not field_name:
                continue
            values.append(field_name.lower().replace("_", "-"))
        return Vary(values)


@dataclass
class CacheControl:
    """
    The subset of Cache-Control response directives needed to decide freshness.

    no_cache and private can be:
        - False: directive not present
        - True: directive present without field names
        - List[str]: directive present with specific field names
    """

    max_age: Optional[int] = None
    s_maxage: Optional[int] = None
    no_cache: Union[bool, List[str]] = False
    no_store: bool = False
    private: Union[bool, List[str]] = False
    public: bool = False
    must_revalidate: bool = False
    proxy_revalidate: bool = False
    extensions: List[str] = field(default_factory=list)


def parse_int_value(value: str) -> Optional[int]:
    """Parse a delta-seconds value, return None if invalid."""
    try:
        val = int(value)
    except ValueError:
        return None
    return val if val >= 0 else None


def split_directives(value: str) -> List[str]:
    # Commas inside quoted strings (e.g. no-cache="Set-Cookie, Authorization") don't split.
    directives: List[str] = []
    current: List[str] = []
    quoted = False

    for char in value:
        if char == '"':
            quoted = not quoted
        if char == "," and not quoted:
            directives.append("".join(current))
            current = []
            continue
        current.append(char)
    directives.append("".join(current))
    return [directive.strip() for directive in directives if directive.strip()]


def parse_cache_control(value: Optional[str]) -> CacheControl:
    """
    Parse a Cache-Control header value.

    Unknown directives are kept verbatim in ``extensions``; malformed values
    are ignored rather than rejected.

    Examples:
        >>> cc = parse_cache_control("public, max-age=3600, must-revalidate")
        >>> cc.public, cc.max_age, cc.must_revalidate
        (True, 3600, True)

        >>> parse_cache_control('no-cache="Set-Cookie, Authorization"').no_cache
        ['set-cookie', 'authorization']
    """
    cc = CacheControl()

    if not value:
        return cc

    for directive in split_directives(value):
        token, _, raw_value = directive.partition("=")
        token = token.strip().lower()
        directive_value = raw_value.strip().strip('"')

        if token == "max-age":
            cc.max_age = parse_int_value(directive_value)
        elif token == "s-maxage":
            cc.s_maxage = parse_int_value(directive_value)
        elif token in ("no-cache", "private"):
            fields: Union[bool, List[str]] = True
            if directive_value:
                fields = [name.strip().lower() for name in directive_value.split(",") if name.strip()]
            setattr(cc, token.replace("-", "_"), fields)
        elif token == "no-store":
            cc.no_store = True
        elif token == "public":
            cc.public = True
        elif token == "must-revalidate":
            cc.must_revalidate = True
        elif token == "proxy-revalidate":
            cc.proxy_revalidate = True
        else:
            cc.extensions.append(directive)

    return cc
