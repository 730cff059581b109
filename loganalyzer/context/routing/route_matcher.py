"""
Route Matcher: classify parsed records by request route

Path templates use ':param' segments, compiled to a prefix-anchored pattern:

    /users/:id   ->   ^/users/[^/]+

so '/users/42' and '/users/42/edit' both belong to the route while
'/accounts/42' does not.
"""

from functools import lru_cache
from typing import Any, Iterable, List, Optional

import regex

from loganalyzer.models import Record, RouteRule

PARAM_PATTERN = regex.compile(r':\w+\b')
SEGMENT_PATTERN = r'[^/]+'

MATCH_ALL = regex.compile(r'.*')
OVERALL = RouteRule(method='', path=MATCH_ALL, label='overall')


@lru_cache(maxsize=256)
def compile_route_path(template: str):
    """Compile a path template into a start-anchored pattern."""
    parts = ['^']
    last_end = 0
    for match in PARAM_PATTERN.finditer(template):
        parts.append(regex.escape(template[last_end:match.start()]))
        parts.append(SEGMENT_PATTERN)
        last_end = match.end()
    parts.append(regex.escape(template[last_end:]))
    return regex.compile(''.join(parts))


def route_pattern(path: Any):
    """Path template string -> compiled pattern; compiled patterns pass through."""
    if isinstance(path, str):
        return compile_route_path(path)
    return path


def make_route(method: Optional[str], path: Any) -> RouteRule:
    """Build a RouteRule with its result label ('GET /users/:id' or '/users/:id')."""
    method = (method or '').upper()
    path_text = path if isinstance(path, str) else getattr(path, 'pattern', str(path))
    label = f"{method} {path_text}" if method else path_text
    return RouteRule(method=method, path=path, label=label)


def match_route(records: Iterable[Record], method: Optional[str], path: Any) -> List[Record]:
    """
    Subset of records belonging to a route.

    A record belongs when the method is empty or equals the record's method
    (case-insensitive), and the path pattern matches the record's url.
    """
    method = (method or '').upper()
    pattern = route_pattern(path)
    matched = []

    for record in records:
        if method:
            record_method = record.get('method')
            if not record_method or str(record_method).upper() != method:
                continue
        url = record.get('url')
        if url is None or not pattern.search(str(url)):
            continue
        matched.append(record)

    return matched


def select(records: List[Record], route: RouteRule) -> List[Record]:
    """Records for a RouteRule; the overall route takes every record."""
    if route is OVERALL:
        return list(records)
    return match_route(records, route.method, route.path)
