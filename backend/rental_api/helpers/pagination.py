"""
Page info construction for list endpoints.

Links are the endpoint URL followed by the request's own query parameters,
re-serialized in the order they were collected. Existing clients compare the
links verbatim, so the serialization rules are kept exactly:

- parameters with a falsy value are skipped
- `page` is rewritten to page + 1 (next) / page - 1 (prev), always followed by "&"
- the parameter in the last position is written without a trailing "&"
"""

import math
from typing import Any, Mapping
from urllib.parse import quote

from rental_api.schemas.response import PageInfo


def total_pages(total_rows: int, limit: Any) -> int:
    if not limit:
        return 1
    try:
        pages = math.ceil(total_rows / limit)
    except (TypeError, ValueError):
        return 1
    return pages or 1


def _build_links(url: str, values: Mapping[str, Any]) -> tuple[str, str]:
    keys = list(values)
    next_link = url
    prev_link = url

    for idx, key in enumerate(keys):
        value = values[key]
        if not value:
            continue
        if key == "page":
            next_link += f"{key}={value + 1}&"
            prev_link += f"{key}={value - 1}&"
        else:
            pair = f"{key}={quote(str(value), safe='')}"
            separator = "&" if idx < len(keys) - 1 else ""
            next_link += pair + separator
            prev_link += pair + separator

    return next_link, prev_link


def page_info_creator(total_rows: int, url: str, values: Mapping[str, Any]) -> PageInfo:
    page = values.get("page") or 1
    pages = total_pages(total_rows, values.get("limit"))
    next_link, prev_link = _build_links(url, values)

    return PageInfo(
        totalPages=pages,
        currentPage=page,
        nextPage=next_link if page < pages else None,
        prevPage=prev_link if page > 1 else None,
        lastPages=pages,
    )


class Paginator:
    """Builds page info for endpoints under a fixed public base URL."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.strip('/')}?"

    def page_info(self, total_rows: int, path: str, values: Mapping[str, Any]) -> PageInfo:
        return page_info_creator(total_rows, self.url_for(path), values)
