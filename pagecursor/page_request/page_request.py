""" Page Request: what the client wants to see """

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union, TypedDict

from pagecursor import exc
from pagecursor.typing import SAModelOrAlias


class PageRequestDict(TypedDict, total=False):
    """ Dict representation of a page request """
    select: Optional[list[str]]
    filter: Optional[dict]
    search: Optional[str]
    sort: Optional[Union[str, list[str]]]

    # Pager
    limit: Optional[int]
    cursor: Optional[str]


@dataclass
class PageRequest:
    """ Page Request: a parsed request for a page of results

    When the Page Request is constructed from the input, fields are parsed, but not yet resolved:
    that is, it is not known whether they actually exist.

    To resolve fields against a specific model or aliased class, resolve_page_request() must be used.
    It resolves every reference to a model's column.
    """
    select: SelectQuery
    filter: FilterQuery
    search: SearchQuery
    sort: SortQuery

    # Pager
    limit: LimitQuery
    cursor: CursorQuery

    __slots__ = 'select', 'filter', 'search', 'sort', 'limit', 'cursor'

    @classmethod
    def from_page_request(cls, page_request: PageRequestDict):
        """ Construct a Page Request from a dict

        Args:
            page_request: A dict you might've gotten from the client's request

        Raises:
            exc.PageRequestError: invalid input
        """
        unknown_keys = set(page_request) - set(PageRequestDict.__annotations__)
        if unknown_keys:
            raise exc.PageRequestError(f'Unsupported keys: {", ".join(sorted(unknown_keys))}')

        return cls(
            select=SelectQuery.from_page_request(page_request.get('select')),
            filter=FilterQuery.from_page_request(page_request.get('filter')),
            search=SearchQuery.from_page_request(page_request.get('search')),
            sort=SortQuery.from_page_request(page_request.get('sort')),
            limit=LimitQuery.from_page_request(page_request.get('limit')),
            cursor=CursorQuery.from_page_request(page_request.get('cursor')),
        )

    @classmethod
    def ensure_page_request(cls, input: Optional[Union[PageRequest, PageRequestDict]]) -> PageRequest:
        """ Construct a Page Request from any valid input """
        if input is None:
            return cls.from_page_request({})
        elif isinstance(input, PageRequest):
            return input
        elif isinstance(input, dict):
            return cls.from_page_request(input)
        else:
            raise exc.PageRequestError(f'PageRequest must be an object, "{type(input).__name__}" given')

    def resolve(self, Model: SAModelOrAlias):
        """ Resolve this page request: resolve references to actual columns of the given model

        Note that unless this is done, the data within this Page Request is incomplete.
        """
        resolve.resolve_page_request(self, Model)
        return self

    def copy(self) -> PageRequest:
        """ Make an unresolved copy of this Page Request

        The copy shares no input objects with the original, so it can be resolved against another model.
        """
        return type(self).from_page_request(self.dict())

    def dict(self) -> PageRequestDict:
        """ Convert the Page Request back into JSON dict """
        return PageRequestDict(
            select=self.select.export(),
            filter=self.filter.export(),
            search=self.search.export(),
            sort=self.sort.export(),
            limit=self.limit.export(),
            cursor=self.cursor.export(),
        )


# Import structures for individual fields
from .select import SelectQuery
from .filter import FilterQuery, SearchQuery
from .sort import SortQuery
from .pager import LimitQuery, CursorQuery
from . import resolve
