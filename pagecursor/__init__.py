__version__ = __import__('importlib.metadata').metadata.version('pagecursor')

from .engine import Query, fetch_page
from .engine.settings import QuerySettings
from .page_request import PageRequest, PageRequestDict

from . import page_request
from . import exc

from .operations.pager import Page, PageMeta, CursorPosition, NULL_POSITION, encode_cursor, decode_cursor
