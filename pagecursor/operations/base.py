from __future__ import annotations

import sqlalchemy as sa
from typing import TYPE_CHECKING

from pagecursor.page_request import PageRequest
from pagecursor.typing import SAModelOrAlias


if TYPE_CHECKING:
    from pagecursor.engine.query_executor import QueryExecutor
    from pagecursor.engine.settings import QuerySettings


class Operation:
    """ Base for all operations. Defines the interface """
    request: PageRequest
    target_Model: SAModelOrAlias
    settings: QuerySettings

    def __init__(self, request: PageRequest, target_Model: SAModelOrAlias, settings: QuerySettings):
        self.request = request
        self.target_Model = target_Model
        self.settings = settings

    def for_query(self, query_executor: QueryExecutor):
        """ Bind this operation to a QueryExecutor

        Called after the Page Request is resolved.
        Make sure that you don't keep a strong reference to `query_executor` because that would be a cyclic dependency
        and you'll have a memory leak!
        """
        return self

    __slots__ = 'request', 'target_Model', 'settings'

    def apply_to_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Modify the SQL Select statement that produces resulting rows """
        raise NotImplementedError

    def apply_to_results(self, query_executor: QueryExecutor, rows: list[dict]) -> list[dict]:
        """ Customize the resulting rows """
        return rows
