from __future__ import annotations

from collections import abc
from typing import Optional, TYPE_CHECKING

import sqlalchemy as sa

from pagecursor.page_request import PageRequest
from pagecursor.sainfo.columns import resolve_column_by_name
from pagecursor.typing import SAModelOrAlias

from .base import Operation


if TYPE_CHECKING:
    from pagecursor.engine.settings import QuerySettings


class SortOperation(Operation):
    """ Sort operation: define the ordering of result rows

    Handles: PageRequest.sort
    When applied to a statement:
    * Adds ORDER BY with the sort field and direction defined by the user
    * Adds the tie-break column, in the same direction, if configured
    """

    def apply_to_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Modify the Select statement: add ORDER BY clause """
        return stmt.order_by(*self.compile_columns())

    def compile_columns(self) -> abc.Iterator[sa.sql.ColumnElement]:
        """ Generate the list of columns, sorted asc()/desc(), to be used in the query """
        field = self.request.sort.field
        tiebreak = get_tiebreak_column(self.request, self.target_Model, self.settings)

        for column in (field.property, tiebreak):
            if column is not None:
                yield column.desc() if field.is_desc else column.asc()


def get_tiebreak_column(request: PageRequest, Model: SAModelOrAlias, settings: QuerySettings) -> Optional[sa.orm.InstrumentedAttribute]:
    """ Get the tie-break column, if the settings want one and the sort field is not that column already """
    if not settings.tiebreak or settings.tiebreak == request.sort.name:
        return None

    return resolve_column_by_name(settings.tiebreak, Model, where='tiebreak')
