"""
Page/limit handling shared by the list endpoints.

List responses look like::

    {"data": [...], "pagination": {"page": 1, "limit": 10, "total": 42,
                                   "totalPages": 5, "hasNext": true, "hasPrev": false}}

Bad ``page``/``limit`` values never fail a request, they fall back to
the defaults.
"""
from __future__ import annotations

import math
from typing import Any, Callable, Iterable, Mapping

ALLOWED_LIMITS = (10, 20, 30, 40, 50)
DEFAULT_LIMIT = 10
DEFAULT_PAGE = 1


def _to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_pagination(params: Mapping[str, Any]) -> tuple[int, int]:
    """Return ``(page, limit)`` from query parameters."""
    page = _to_int(params.get('page'))
    if page is None or page < 1:
        page = DEFAULT_PAGE
    limit = _to_int(params.get('limit'))
    if limit not in ALLOWED_LIMITS:
        limit = DEFAULT_LIMIT
    return page, limit


def pagination_meta(page: int, limit: int, total: int) -> dict:
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'totalPages': math.ceil(total / limit),
        'hasNext': page * limit < total,
        'hasPrev': page > 1,
    }


def paginate(queryset, params: Mapping[str, Any], serialize: Callable[[Any], dict]) -> dict:
    """Slice an ordered queryset and wrap the page in the list envelope."""
    page, limit = parse_pagination(params)
    skip = (page - 1) * limit
    total = queryset.count()
    rows: Iterable[Any] = queryset[skip:skip + limit]
    return {
        'data': [serialize(row) for row in rows],
        'pagination': pagination_meta(page, limit, total),
    }
