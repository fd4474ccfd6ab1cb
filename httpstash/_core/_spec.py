from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Optional

from httpstash._core._headers import Headers, Vary, parse_cache_control
from httpstash._core.models import Response
from httpstash._utils import generate_http_date, parse_date

logger = logging.getLogger("httpstash.core.spec")

ONE_WEEK = 604_800


def requests_match(vary: Optional[str], headers_a: Headers, headers_b: Headers) -> bool:
    """
    Determines whether two request header sets select the same variant.

    Parameters:
    ----------
    vary : Optional[str]
        The Vary value recorded on the stored response
    headers_a, headers_b : Headers
        The request header sets to compare

    Returns:
    -------
    bool
        True if no variance is declared or every named header has the same
        values in both sets. A header absent from one set only matches a header
        absent from the other; it never matches an empty value.

    Examples:
    --------
    >>> requests_match("", Headers({"cookie": "a=1"}), Headers({}))
    True
    >>> requests_match("Cookie", Headers({"cookie": "a=1"}), Headers({"cookie": "a=2"}))
    False
    >>> requests_match("Cookie", Headers({}), Headers({"cookie": ""}))
    False
    """
    if not vary:
        return True

    for header in Vary.from_value(vary).values:
        if headers_a.get_list(header) != headers_b.get_list(header):
            return False

    return True


def get_freshness_lifetime(response: Response, is_cache_shared: bool) -> Optional[int]:
    """
    Calculates the freshness lifetime of a stored response in seconds.

    RFC 9111 Section 4.2.1, first match wins:
     1. s-maxage, for shared caches only
     2. max-age
     3. Expires minus Date
     4. heuristic freshness from Last-Modified

    Returns None if none of them apply.
    """
    cache_control = parse_cache_control(response.headers.get("cache-control"))

    if is_cache_shared and cache_control.s_maxage is not None:
        return cache_control.s_maxage

    if cache_control.max_age is not None:
        return cache_control.max_age

    if "expires" in response.headers:
        expires_timestamp = parse_date(response.headers["expires"])
        if expires_timestamp is None:
            # RFC 9111 Section 5.3: an invalid Expires means "already expired"
            return 0

        date_timestamp = parse_date(response.headers["date"]) if "date" in response.headers else None
        if date_timestamp is None:
            date_timestamp = int(time.time())
        return expires_timestamp - date_timestamp

    return get_heuristic_freshness(response)


def get_heuristic_freshness(response: Response) -> Optional[int]:
    """10% of the time since Last-Modified, capped at one week."""
    last_modified = response.headers.get("last-modified")
    if not last_modified:
        return None

    last_modified_timestamp = parse_date(last_modified)
    if last_modified_timestamp is None:
        return None

    heuristic_freshness = int((time.time() - last_modified_timestamp) * 0.1)
    return max(0, min(ONE_WEEK, heuristic_freshness))


def get_age(response: Response) -> int:
    """
    Calculates the current age of a stored response in seconds.

    The larger of the Age header and the apparent age (now minus Date),
    never negative. Missing or invalid values count as zero.
    """
    age_value = 0
    if "age" in response.headers:
        try:
            age_value = max(0, int(response.headers["age"].split(",")[0]))
        except ValueError:
            age_value = 0

    apparent_age = 0
    if "date" in response.headers:
        date = parse_date(response.headers["date"])
        if date is not None:
            apparent_age = max(0, int(time.time() - date))

    return max(age_value, apparent_age)


def is_fresh(response: Response, is_cache_shared: bool = True) -> bool:
    freshness_lifetime = get_freshness_lifetime(response, is_cache_shared)
    if freshness_lifetime is None:
        return False
    return freshness_lifetime > get_age(response)


def expire(response: Response, is_cache_shared: bool = True) -> Response:
    """
    Marks a fresh response as stale.

    The Age header is raised to the freshness lifetime and Expires is set to
    the Unix epoch. Stale responses are returned unchanged.
    """
    if not is_fresh(response, is_cache_shared):
        return response

    freshness_lifetime = get_freshness_lifetime(response, is_cache_shared)
    headers = response.headers.copy()
    headers.set("age", str(freshness_lifetime))
    # An Expires in the past also shadows heuristic freshness, which keeps growing.
    headers.set("expires", generate_http_date(0))

    logger.debug("Expiring response with freshness lifetime %s", freshness_lifetime)
    return replace(response, headers=headers)
