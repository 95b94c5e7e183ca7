""" QueryExecutor: an object that binds operations together to execute a Page Request

This is low level. See Query.
"""

from __future__ import annotations

from collections import abc

import sqlalchemy as sa

from pagecursor import operations
from pagecursor.page_request import PageRequest, SortQuery
from pagecursor.page_request.resolve import resolve_page_request
from pagecursor.typing import SAModelOrAlias, SARowDict

from .settings import QuerySettings


class QueryExecutor:
    """ Query Executor: executes operations on a Page Request

    This low-level class puts everything together and applies individual operations to a Page Request.
    It initiates an SqlAlchemy Core Statement (`sa.Select`), lets every operation modify it (select, filter, sort, pager),
    then executes it and lets operations inspect the rows.

    This is a low-level interface.
    See `Query`
    """
    # The Page Request to execute.
    request: PageRequest

    # The target model to execute the Page Request against
    Model: SAModelOrAlias

    # The Query settings
    settings: QuerySettings

    # Query customization handlers: functions to alter `sa.sql.Select` statement.
    # They are applied after filter and sort, but before the pager adds the cursor condition and the LIMIT.
    #
    # Mutable list: you can append your own custom handlers.
    #
    # Callback args:
    #   (self, statement)
    # Example usage: provide additional filtering, e.g. for security
    # Example usage:
    #   @query.customize_statements.append
    #   def security_filter(query: QueryExecutor, stmt: sa.sql.Select) -> sa.sql.Select:
    #       return stmt.where(Article.tenant_id == tenant_id)
    customize_statements: list[CustomizeStatementCallable]

    # Results customization handler.
    # This is your last chance to catch results.
    #
    # Mutable list: you can append your own custom handlers.
    #
    # Callback args:
    #   (self, list[row dict])
    # Example usage:
    #   @query.customize_results.append
    #   def preprocess_results(query: QueryExecutor, rows: list[dict]) -> list[dict]:
    customize_results: list[CustomizeResultsCallable]

    def __init__(self, request: PageRequest, Model: SAModelOrAlias, settings: QuerySettings = None):
        """ Initialize a Query Executor for the given Page Request

        Args:
            request: The Page Request to execute
            Model: The SqlAlchemy Model class to execute the request against
            settings: Query settings

        Raises:
            exc.InvalidColumnError: Invalid column name mentioned
            exc.PageRequestError: Page request syntax error
        """
        # The request and the model to query against.
        # The executor resolves its own copy: the caller's request is never modified.
        assert isinstance(request, PageRequest)
        self.request = request = request.copy()
        self.Model = Model
        self.settings = settings or self.DEFAULT_SETTINGS

        # Customization handlers
        self.customize_statements = [self.settings.customize_statement]
        self.customize_results = [self.settings.customize_result]

        # No sorting? Use the default one. Pagination is impossible without sorting.
        if self.request.sort.field is None:
            self.request.sort = SortQuery.from_page_request(self.settings.default_sort)

        # Init operations
        self.select_op = self.SelectOperation(request, Model, self.settings)
        self.filter_op = self.FilterOperation(request, Model, self.settings)
        self.sort_op = self.SortOperation(request, Model, self.settings)
        self.pager_op = self.PagerOperation(request, Model, self.settings)

        # Resolve every input
        resolve_page_request(self.request, self.Model)

        # Run for_query() on every operation
        # It is important that this is done after `self.request` is resolved!
        for op in self._operations():
            op.for_query(self)

    __slots__ = (
        'request', 'Model', 'settings',
        'customize_statements', 'customize_results',
        'select_op', 'filter_op', 'sort_op', 'pager_op',
    )

    def fetchall(self, connection: sa.engine.Connection) -> list[SARowDict]:
        """ Execute the query and fetch result rows

        Database errors are not handled here: they propagate to the caller.
        """
        # Load all results
        rows = list(self._load_results(connection))

        # Apply operations & customizations
        rows = self._apply_operations_to_results(rows)

        # Done
        return rows

    def count(self, connection: sa.engine.Connection) -> int:
        """ Execute the query and return the number of matching rows only

        The cursor and the limit are ignored: this is the total for all pages.
        """
        # Prepare the statement
        stmt = sa.select(sa.func.count()).select_from(self.Model)

        # Apply everything that may change the number of matching rows
        stmt = self.filter_op.apply_to_statement(stmt)
        for handler in self.customize_statements:
            stmt = handler(self, stmt)

        # Run
        return connection.execute(stmt).scalar()  # type: ignore[return-value]

    # Default settings object
    DEFAULT_SETTINGS = QuerySettings()

    # Overridable classes: operations
    # Replace to customize how operations are executed
    SelectOperation = operations.SelectOperation
    FilterOperation = operations.FilterOperation
    SortOperation = operations.SortOperation
    PagerOperation = operations.PagerOperation

    def _operations(self) -> list[operations.base.Operation]:
        return [self.select_op, self.filter_op, self.sort_op, self.pager_op]

    def _load_results(self, connection: sa.engine.Connection) -> abc.Iterator[SARowDict]:
        """ Build a SELECT statement and fetch results as dicts """
        stmt = self.statement()
        res = connection.execute(stmt)
        yield from (dict(row) for row in res.mappings())

    @property
    def limit(self) -> int:
        """ Get the final LIMIT set on the query

        It may be changed because of:
        1. User request
        2. Default limit
        3. Max limit
        """
        return self.pager_op.limit

    def statement(self) -> sa.sql.Select:
        """ Build an SQL SELECT statement for the current Model.

        Use `self.customize_statements` to catch the statement before the pager applies the cursor and the limit.
        """
        # Prepare a boilerplate statement for the current model
        # It has no selected fields yet.
        stmt = sa.select().select_from(self.Model)

        # Apply operations to this statement: select, filter, sort, pager, and customization too.
        stmt = self._apply_operations_to_statement(stmt)

        # Done
        return stmt

    def _apply_operations_to_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Apply operations & handlers to the statement """
        # Operations: apply
        stmt = self.select_op.apply_to_statement(stmt)
        stmt = self.filter_op.apply_to_statement(stmt)
        stmt = self.sort_op.apply_to_statement(stmt)

        # Customization handlers: apply
        # Visibility conditions are added here, independently of the cursor.
        for handler in self.customize_statements:
            stmt = handler(self, stmt)

        # Apply `pager` last: it adds the cursor condition and the LIMIT
        stmt = self.pager_op.apply_to_statement(stmt)

        # Done
        return stmt

    def _apply_operations_to_results(self, rows: list[SARowDict]) -> list[SARowDict]:
        """ Apply operations & handlers to the result set """
        # Apply operations
        for op in self._operations():
            rows = op.apply_to_results(self, rows)

        # Apply customization handlers
        for handler in self.customize_results:
            rows = handler(self, rows)

        # Done
        return rows


# A callable that customizes a statement
CustomizeStatementCallable = abc.Callable[[QueryExecutor, sa.sql.Select], sa.sql.Select]

# A callable that customizes result rows
CustomizeResultsCallable = abc.Callable[[QueryExecutor, list[SARowDict]], list[SARowDict]]
