""" Cursor-based pagination

A cursor remembers the sort field value of the last row on a page.
The next page continues with rows strictly beyond that value.
One extra row is always loaded to see if there's a next page: no COUNT() query is needed.
"""

from .cursor import CursorPosition, NULL_POSITION, encode_cursor, decode_cursor
from .page import Page, PageMeta
from .pager import PagerOperation
