"""Paged listing.

A page chain is a sequence of immutable PageCursor values. Each cursor holds
its items plus, when more results exist, the PageRequest describing the next
page. Fetching is a pure function of that request: it re-runs the listing,
skips ``offset`` matches and over-fetches by one to learn whether another
page follows.
"""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass, field, replace
from itertools import islice
from typing import Callable, Iterator

from bucketstore.common.cancellation import CancellationToken, raise_if_cancelled
from bucketstore.domain.models import FileSpec
from bucketstore.services.listing import ObjectLister


@dataclass(frozen=True, slots=True)
class PageRequest:
    """Continuation state for the next page of a listing."""

    search_pattern: str | None
    page_size: int
    offset: int = 0

    @property
    def page(self) -> int:
        """1-based page number of this request."""
        return self.offset // self.page_size + 1

    def rewind(self, count: int) -> "PageRequest":
        """Request the same page after count earlier matches were removed."""
        return replace(self, offset=max(0, self.offset - count))


@dataclass(frozen=True, slots=True)
class PageCursor:
    items: tuple[FileSpec, ...]
    continuation: PageRequest | None = None
    _fetch: Callable[[PageRequest, CancellationToken | None], "PageCursor"] | None = (
        field(default=None, repr=False, compare=False)
    )

    @property
    def has_more(self) -> bool:
        return self.continuation is not None

    def fetch_next(
        self, cancellation: CancellationToken | None = None
    ) -> "PageCursor | None":
        """Fetch the following page, or return None when exhausted."""
        if self.continuation is None or self._fetch is None:
            return None
        return self._fetch(self.continuation, cancellation)

    def iter_pages(
        self, cancellation: CancellationToken | None = None
    ) -> Iterator["PageCursor"]:
        cursor: PageCursor | None = self
        while cursor is not None:
            yield cursor
            cursor = cursor.fetch_next(cancellation)

    def __iter__(self) -> Iterator[FileSpec]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


EMPTY_PAGE = PageCursor(items=())


class Pager:
    """Turns an ObjectLister into bounded, forward-only pages."""

    def __init__(self, lister: ObjectLister) -> None:
        self._lister = lister

    def first_page(
        self,
        search_pattern: str | None,
        page_size: int,
        cancellation: CancellationToken | None = None,
    ) -> PageCursor:
        if page_size <= 0:
            return EMPTY_PAGE
        return self.fetch_page(
            PageRequest(search_pattern=search_pattern, page_size=page_size),
            cancellation,
        )

    def fetch_page(
        self,
        request: PageRequest,
        cancellation: CancellationToken | None = None,
    ) -> PageCursor:
        raise_if_cancelled(cancellation)
        limit = request.page_size + 1
        with closing(self._lister.list(request.search_pattern, cancellation)) as entries:
            items = list(islice(entries, request.offset, request.offset + limit))

        continuation = None
        if len(items) == limit:
            items.pop()
            continuation = replace(request, offset=request.offset + request.page_size)

        return PageCursor(
            items=tuple(items), continuation=continuation, _fetch=self.fetch_page
        )
