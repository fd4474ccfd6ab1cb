from __future__ import annotations

import calendar
import typing as tp
from email.utils import formatdate, parsedate_tz

HEADERS_ENCODING = "iso-8859-1"


def parse_date(date: str) -> tp.Optional[int]:
    parsed = parsedate_tz(date)
    if parsed is None:
        return None
    timestamp = calendar.timegm(parsed[:6])
    return timestamp


def float_seconds_to_int_milliseconds(seconds: tp.Union[int, float]) -> int:
    return int(seconds * 1000)


def generate_http_date(timeval: tp.Optional[float] = None) -> str:
    """
    Generate a Date header value for HTTP responses.
    Returns date in RFC 1123 format (required by HTTP/1.1).

    Example output: 'Sun, 26 Oct 2025 12:34:56 GMT'
    """
    return formatdate(timeval=timeval, localtime=False, usegmt=True)


T = tp.TypeVar("T")


def partition(iterable: tp.Iterable[T], predicate: tp.Callable[[T], bool]) -> tp.Tuple[tp.List[T], tp.List[T]]:
    """
    Partition an iterable into two lists: one for matching items and one for non-matching items.

    Example:
        ```
        evens, odds = partition([1, 2, 3, 4, 5], lambda x: x % 2 == 0)
        ```
    """
    matching, non_matching = [], []
    for item in iterable:
        if predicate(item):
            matching.append(item)
        else:
            non_matching.append(item)
    return matching, non_matching
