from __future__ import annotations

from collections import abc

import sqlalchemy as sa

from pagecursor.sainfo.columns import all_columns

from .base import Operation
from .sort import get_tiebreak_column


class SelectOperation(Operation):
    """ Select operation: add columns to the statement

    Handles: PageRequest.select
    When applied to a statement:
    * Adds SELECT column names that the user selected, or every column if nothing is selected
    * Adds the sort column and the tie-break column: the pager needs them to make the next cursor
    """

    def apply_to_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Modify the Select statement: add SELECT fields """
        # Every column is labeled with its attribute name: that's the key it will have in the result dict.
        # Columns are de-duplicated by this name.
        columns = {
            attribute.key: attribute.label(attribute.key)
            for attribute in self.compile_columns()
        }
        return stmt.add_columns(*columns.values())

    def compile_columns(self) -> abc.Iterator[sa.orm.InstrumentedAttribute]:
        """ Generate the list of columns to be loaded by this query """
        # Columns that the user has requested
        if self.request.select.fields:
            for field in self.request.select.fields:
                yield field.property
        # Nothing selected: everything
        else:
            yield from all_columns(self.target_Model)

        # Columns that the pager needs
        yield self.request.sort.field.property

        tiebreak = get_tiebreak_column(self.request, self.target_Model, self.settings)
        if tiebreak is not None:
            yield tiebreak
