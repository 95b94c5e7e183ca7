""" Page Request: pager inputs """

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pagecursor import exc

from .base import OperationInputBase


@dataclass
class LimitQuery(OperationInputBase):
    """ Page Request input: the "limit" """
    # Limit: the number of objects per page
    limit: Optional[int]

    @classmethod
    def from_page_request(cls, limit: Optional[int]):  # type: ignore[override]
        # `bool` is an `int`, but nobody means it
        if limit is None:
            return cls(limit=None)
        elif not isinstance(limit, int) or isinstance(limit, bool):
            raise exc.PageRequestError('"limit" must be an integer')
        elif limit <= 0:
            raise exc.PageRequestError('"limit" must be a positive integer')
        else:
            return cls(limit=limit)

    def export(self) -> Optional[int]:
        return self.limit


@dataclass
class CursorQuery(OperationInputBase):
    """ Page Request input: the "cursor"

    The cursor is kept as the client has sent it: it's decoded by the pager, which never fails on it.
    """
    # Opaque cursor value
    cursor: Optional[str]

    @classmethod
    def from_page_request(cls, cursor: Optional[str]):  # type: ignore[override]
        if cursor is None or isinstance(cursor, str):
            return cls(cursor=cursor)
        else:
            raise exc.PageRequestError('"cursor" must be a string')

    def export(self) -> Optional[str]:
        return self.cursor
