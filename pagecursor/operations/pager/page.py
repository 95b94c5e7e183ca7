from __future__ import annotations

from typing import Any, NamedTuple, Optional


class PageMeta(NamedTuple):
    """ Navigation info for a page """
    # Is there another page after this one?
    has_next_page: bool

    # Was a cursor given? That's all it tells: a cursor could point to the first page as well
    has_previous_page: bool

    # Cursor to the next page, if available
    next_cursor: Optional[str] = None

    # The cursor that got us here. Feed it back to come back to this page.
    previous_cursor: Optional[str] = None

    def dict(self) -> dict:
        """ Export as JSON dict. Missing cursors are omitted """
        res: dict[str, Any] = {
            'hasNextPage': self.has_next_page,
            'hasPreviousPage': self.has_previous_page,
        }
        if self.next_cursor is not None:
            res['nextCursor'] = self.next_cursor
        if self.previous_cursor is not None:
            res['previousCursor'] = self.previous_cursor
        return res


class Page(NamedTuple):
    """ A page of results """
    # Result rows, at most `limit`
    items: list[dict]

    # Navigation
    meta: PageMeta

    def dict(self) -> dict:
        """ Export as JSON dict: { items, meta: { hasNextPage, hasPreviousPage, nextCursor?, previousCursor? } } """
        return {
            'items': self.items,
            'meta': self.meta.dict(),
        }
