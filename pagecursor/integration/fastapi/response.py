""" Response models: a page of items, and navigation info """

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from pagecursor.operations.pager import Page, PageMeta


ItemT = TypeVar('ItemT')


class PageMetaResponse(BaseModel):
    """ Navigation info """
    model_config = ConfigDict(populate_by_name=True)

    has_next_page: bool = Field(..., alias='hasNextPage', description='Whether more results are available')
    has_previous_page: bool = Field(..., alias='hasPreviousPage', description='Whether a cursor was given')
    next_cursor: Optional[str] = Field(None, alias='nextCursor', description='Opaque cursor for the next page')
    previous_cursor: Optional[str] = Field(None, alias='previousCursor', description='The cursor this page was loaded with')

    @classmethod
    def from_page_meta(cls, meta: PageMeta) -> PageMetaResponse:
        return cls(
            has_next_page=meta.has_next_page,
            has_previous_page=meta.has_previous_page,
            next_cursor=meta.next_cursor,
            previous_cursor=meta.previous_cursor,
        )


class PageResponse(BaseModel, Generic[ItemT]):
    """ A page of items

    Example:
        @app.get('/applications/', response_model=PageResponse[ApplicationSchema], response_model_by_alias=True)
        def list_applications(request: PageRequest = Depends(page_request)):
            return PageResponse.from_page(fetch_page(connection, Application, request))
    """
    items: list[ItemT]
    meta: PageMetaResponse

    @classmethod
    def from_page(cls, page: Page) -> PageResponse:
        return cls(items=page.items, meta=PageMetaResponse.from_page_meta(page.meta))
