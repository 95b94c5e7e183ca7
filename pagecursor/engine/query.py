""" Query: executes Page Requests against an SqlAlchemy Model class """

from __future__ import annotations

from functools import partial
from typing import Optional, Union

import sqlalchemy as sa

from pagecursor.operations.pager import Page, PageMeta
from pagecursor.page_request import PageRequest, PageRequestDict
from pagecursor.typing import SAModelOrAlias
from .query_executor import QueryExecutor, QuerySettings


class Query(QueryExecutor):
    """ Query: executes page requests against a model.

    This class contains shortcuts, helpers, and sugar -- in addition to what QueryExecutor does.

    Example:
        page_request = {'sort': 'created_at-', 'limit': 20}
        q = Query(page_request, models.Application)
        page = q.fetch_page(connection)
    """
    def __init__(self, request: Union[PageRequest, PageRequestDict, None], Model: SAModelOrAlias, settings: QuerySettings = None):
        """ Prepare to make a query with this Page Request against target Model

        Args:
            request: The Page Request, parsed, or its dict
            Model: The Model class to query against

        Raises:
            exc.InvalidColumnError: Invalid column name mentioned (programming error)
            exc.PageRequestError: Page request syntax error (wrong operator name, argument type)
        """
        # Parse the Page Request
        request = PageRequest.ensure_page_request(request)

        # Proceed
        super().__init__(request, Model, settings=settings)

    @classmethod
    def prepare(cls, Model: SAModelOrAlias, settings: QuerySettings = None):
        """ Prepare to make a Query against the provided model

        Example:
            application_settings = pagecursor.QuerySettings(...)
            query_applications = Query.prepare(models.Application, application_settings)
            q = query_applications(page_request)
        """
        return partial(cls, Model=Model, settings=settings)

    def page_meta(self) -> PageMeta:
        """ Get navigation info: whether there's a next page, and cursors to get there

        Only available after the query is executed.
        """
        return self.pager_op.get_page_meta()

    def fetch_page(self, connection: sa.engine.Connection) -> Page:
        """ Execute the query and get one page of results, with navigation info """
        items = self.fetchall(connection)
        return Page(items=items, meta=self.page_meta())


def fetch_page(
        connection: sa.engine.Connection,
        Model: SAModelOrAlias,
        request: Union[PageRequest, PageRequestDict, None] = None,
        *,
        settings: Optional[QuerySettings] = None,
        **fields) -> Page:
    """ Load one page of rows

    Example:
        page = fetch_page(connection, models.Application, cursor=token, limit=20)
        page = fetch_page(connection, models.Application, {'filter': {'status': 'new'}, 'cursor': token})

    Args:
        connection: The connection to run the query with
        Model: The Model class to load rows of
        request: The Page Request, or its dict
        settings: Query settings: default limit, default sort, visibility conditions
        **fields: Page Request fields given as keyword arguments. They override the same keys in `request`.

    Raises:
        exc.InvalidColumnError: Invalid column name mentioned
        exc.PageRequestError: Page request syntax error
    """
    # Keyword fields are merged into the request dict
    if fields:
        if isinstance(request, PageRequest):
            request = {**request.dict(), **fields}  # type: ignore[misc]
        else:
            request = {**(request or {}), **fields}  # type: ignore[misc]

    # Execute
    return Query(request, Model, settings=settings).fetch_page(connection)
