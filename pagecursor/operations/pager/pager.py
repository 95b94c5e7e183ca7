from __future__ import annotations

import logging
from typing import Any, Optional, TYPE_CHECKING

import sqlalchemy as sa

from pagecursor import exc
from pagecursor.page_request import PageRequest
from pagecursor.sainfo.columns import coerce_to_column_type
from pagecursor.typing import SAModelOrAlias, SARowDict

from pagecursor.operations.base import Operation
from pagecursor.operations.sort import get_tiebreak_column

from .cursor import CursorPosition, NULL_POSITION
from .page import PageMeta


if TYPE_CHECKING:
    from pagecursor.engine.settings import QuerySettings
    from pagecursor.engine.query_executor import QueryExecutor


logger = logging.getLogger(__name__)


class PagerOperation(Operation):
    """ Pager operation: cursor pagination

    Handles: PageRequest.cursor, PageRequest.limit
    When applied to a statement:
    * Adds a WHERE condition that continues after the cursor: `sort_field < value` (DESC) or `sort_field > value` (ASC)
    * Adds LIMIT, with one extra row to see if there's a next page
    When applied to results:
    * Removes the extra row and remembers whether there was one
    """
    # String value of the cursor, as given
    cursor: Optional[str]

    # Decoded cursor
    position: CursorPosition

    # How many items to include
    limit: int

    # Page meta: becomes available after analyzing the result rows
    page_meta: Optional[PageMeta]

    def __init__(self, request: PageRequest, target_Model: SAModelOrAlias, settings: QuerySettings):
        super().__init__(request, target_Model, settings)

        # Prepare the limit
        limit = self.settings.get_final_limit(self.request.limit.limit)
        if not limit:
            raise exc.RuntimeQueryError('Cursor pagination needs a limit. Set QuerySettings.default_limit')
        self.limit = limit

        # Decode the cursor. Never fails: a broken cursor means the first page
        self.cursor = self.request.cursor.cursor or None
        self.position = CursorPosition.decode(self.cursor)

        self.page_meta = None

    __slots__ = 'cursor', 'position', 'limit', 'page_meta'

    def for_query(self, query_executor: QueryExecutor):
        # Convert the cursor value into the column type
        # It needs to be done here because the sort field has to be resolved first
        self.position = self._coerce_position(self.position)
        return self

    def get_page_meta(self) -> PageMeta:
        """ Get navigation info: is there a next page, and the cursor to it """
        # Page meta can only be generated after the query is actually executed
        if self.page_meta is None:
            raise RuntimeError(
                "It's not possible to generate page meta before the result set rows are all fetched. "
                "Call fetchall() first."
            )

        return self.page_meta

    # Override parent methods

    def apply_to_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Modify the Select statement: continue after the cursor, load one more row than needed """
        condition = self.compile_cursor_condition()
        if condition is not None:
            stmt = stmt.where(condition)

        # We will always load one more row to check if there's a next page
        return stmt.limit(self.limit + 1)

    def apply_to_results(self, query_executor: QueryExecutor, rows: list[SARowDict]) -> list[SARowDict]:
        """ Inspect the result set: remove the extra row, prepare the page meta """
        # Do we have a next page?
        has_next_page = len(rows) > self.limit

        # We've loaded one extra row. Now remove it.
        if has_next_page:
            del rows[self.limit:]

        # Cursor to the next page: the position of the last row
        next_cursor = self.position_of(rows[-1]).encode() if has_next_page else None

        self.page_meta = PageMeta(
            has_next_page=has_next_page,
            # Not derived from data: a cursor was given, so there must have been a page before
            has_previous_page=self.cursor is not None,
            next_cursor=next_cursor,
            previous_cursor=self.cursor,
        )
        logger.debug('%s: loaded %d rows, has_next_page=%s', self.target_Model, len(rows), has_next_page)

        return rows

    # Cursor tools

    def compile_cursor_condition(self) -> Optional[sa.sql.ColumnElement]:
        """ Generate a condition that selects rows after the cursor

        Returns:
            The condition, or None when there's no cursor
        """
        value, id = self.position
        if value is None:
            return None

        field = self.request.sort.field
        column = field.property

        # `after` is ">" for ASC, "<" for DESC
        def after(col, val):
            return col < val if field.is_desc else col > val

        # With a tie-break column: (sort, tiebreak) comes after (value, id)
        tiebreak = get_tiebreak_column(self.request, self.target_Model, self.settings)
        if tiebreak is not None and id is not None:
            return sa.or_(
                after(column, value),
                sa.and_(column == value, after(tiebreak, id)),
            ).self_group()
        # Without: only the sort field. Rows with equal values at the page boundary may be skipped.
        else:
            return after(column, value)

    def position_of(self, row: SARowDict) -> CursorPosition:
        """ Get the cursor position that points to this row """
        field = self.request.sort.field
        value = row[field.name]

        # A NULL would encode as "no cursor", and the client would go back to the first page
        if value is None:
            logger.warning(
                'Sort field %r is NULL at a page boundary; the next cursor restarts pagination. '
                'Sort by a NOT NULL column.', field.name
            )

        tiebreak = get_tiebreak_column(self.request, self.target_Model, self.settings)
        if tiebreak is not None:
            return CursorPosition(value=value, id=row[tiebreak.key])
        else:
            return CursorPosition(value=value)

    def _coerce_position(self, position: CursorPosition) -> CursorPosition:
        """ Convert cursor values into the types of their columns. A value that won't convert gives NULL_POSITION """
        if position.value is None:
            return position

        tiebreak = get_tiebreak_column(self.request, self.target_Model, self.settings)
        try:
            value = coerce_to_column_type(self.request.sort.field.property, position.value)
            id: Any = None
            if tiebreak is not None and position.id is not None:
                id = coerce_to_column_type(tiebreak, position.id)
        except (ValueError, TypeError, OverflowError) as e:
            logger.debug('Ignoring a cursor with a value that does not fit the column: %r: %s', position, e)
            return NULL_POSITION

        return CursorPosition(value=value, id=id)
