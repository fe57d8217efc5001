"""
Page‑number pagination for list endpoints.

``PageParams`` is used as a FastAPI dependency to read ``page`` and
``per_page`` from the query string; ``paginate`` runs a count query
and a ``LIMIT``/``OFFSET`` query and returns the rows with the page
metadata.
"""

import math
import sqlite3
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from fastapi import Query

from .config import settings
from .db import MAX_ROW_ID


@dataclass
class PageParams:
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def page_params(
    page: int = Query(
        1, ge=1, le=MAX_ROW_ID // settings.max_page_size, description="1‑based page number"
    ),
    per_page: int = Query(
        settings.page_size, ge=1, le=settings.max_page_size, description="Items per page"
    ),
) -> PageParams:
    return PageParams(page=page, per_page=per_page)


def page_meta(params: PageParams, total: int) -> dict:
    return {
        "current_page": params.page,
        "per_page": params.per_page,
        "total": total,
        "last_page": max(1, math.ceil(total / params.per_page)),
    }


def paginate(
    cursor: sqlite3.Cursor,
    query: str,
    count_query: str,
    args: Sequence[Any],
    params: PageParams,
) -> Tuple[List[dict], dict]:
    """Fetch one page of ``query`` as dicts together with its metadata.

    ``query`` must not contain ``LIMIT``/``OFFSET``; both queries take
    the same positional ``args``.
    """
    total = cursor.execute(count_query, tuple(args)).fetchone()[0]
    rows = cursor.execute(
        f"{query} LIMIT ? OFFSET ?", (*args, params.per_page, params.offset)
    ).fetchall()
    return [dict(row) for row in rows], page_meta(params, total)
