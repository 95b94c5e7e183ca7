from __future__ import annotations

import dataclasses
from typing import Optional, TYPE_CHECKING


if TYPE_CHECKING:
    import sqlalchemy as sa
    from .query_executor import QueryExecutor, SARowDict


@dataclasses.dataclass
class QuerySettings:
    """ Settings for Query

    This object defines additional behavior that may be used with queries:
    limit result rows, default sorting, text search, customize queries
    """
    # The `limit` you get by default, if not specified
    default_limit: int = 20

    # The max number of items you get, regardless of the limit
    max_limit: Optional[int] = None

    # Sorting, if the request has none. Syntax: "field-" or "field+"
    default_sort: str = 'created_at-'

    # Columns that the "search" text is looked for in
    search_fields: tuple[str, ...] = ()

    # Name of a unique column that breaks ties between rows with equal sort values. E.g. "id".
    # When set, cursors carry its value too, and no row is skipped at page boundaries.
    tiebreak: Optional[str] = None

    # ### Callbacks for QueryExecutor
    # QueryExecutor and Operations will use these methods to apply the settings

    def get_final_limit(self, limit: Optional[int]) -> Optional[int]:
        """ Callback that fine-tunes the `limit` of a query by applying default and max limits

        Used by: the "pager" operation to decide how many rows to limit the result set to.
        """
        # Apply default limit
        if not limit:
            limit = self.default_limit

        # Apply max limit
        if limit and self.max_limit:
            limit = min(limit, self.max_limit)

        # Done
        return limit

    def customize_statement(self, query: QueryExecutor, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Callback that customizes query statement

        Used by: QueryExecutor to customize the statement before the pager applies the cursor.
        This is the place for visibility conditions: tenant, owner, "published only".
        They apply no matter what the cursor says.

        Default behavior: none
        You can override this method for custom behavior
        """
        return stmt

    def customize_result(self, query: QueryExecutor, rows: list[SARowDict]) -> list[SARowDict]:
        """ Callback that customizes query results

        Used by: QueryExecutor to customize result rows right before they are returned to the user

        Default behavior: none
        You can override this method for custom behavior
        """
        return rows
