from collections import abc
from typing import Any, Union

import sqlalchemy as sa

from pagecursor.page_request.filter import FilterExpressionBase, FieldFilterExpression, BooleanFilterExpression
from pagecursor import exc
from pagecursor.sainfo.columns import coerce_to_column_type, resolve_column_by_name

from .base import Operation


class FilterOperation(Operation):
    """ Filter: applies filter conditions and the text search

    Handles: PageRequest.filter, PageRequest.search
    When applied to a statement:
    * Adds the WHERE clause
    """

    def apply_to_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Modify the Select statement: add the WHERE clause """
        # Compile the conditions
        conditions = [
            self._compile_condition(condition)
            for condition in self.request.filter.conditions
        ]

        # Text search
        if self.request.search.text:
            conditions.append(self._compile_search(self.request.search.text))

        # Add the WHERE clause
        if conditions:
            stmt = stmt.where(*conditions)

        # Done
        return stmt

    def _compile_condition(self, condition: FilterExpressionBase) -> sa.sql.ColumnElement:
        """ Generate a SQL filter expression for the condition

        Args:
            condition: a field expression (field == value) or a bool expression (x AND y AND z)
        """
        # Field expressions
        if isinstance(condition, FieldFilterExpression):
            return self._compile_field_condition(condition)
        # Boolean expressions
        elif isinstance(condition, BooleanFilterExpression):
            return self._compile_boolean_conditions(condition)
        # Surprised facial expressions
        else:
            raise NotImplementedError(repr(condition))

    def _compile_field_condition(self, condition: FieldFilterExpression) -> sa.sql.ColumnElement:
        """ Generate an SQL statement for a field condition: e.g. "field == value"

        A field expression is represented by a class that encapsulates the following syntax:

            field operator value
        """
        # Validate: check that it makes sense
        self._validate_operator_argument(condition)

        # Get the callable for the operator
        operator_lambda = self._get_operator_lambda(condition.operator)

        # Convert the value: JSON has no dates
        col = condition.property
        val = self._coerce_value(condition)

        # Apply the operator
        return operator_lambda(
            col,  # left operand
            val,  # right operand
            condition.value  # original value
        )

    def _compile_boolean_conditions(self, condition: BooleanFilterExpression) -> sa.sql.ColumnElement:
        """ Generate an SQL statement for a boolean expression: e.g. "x AND y AND z"

        A boolean expression is represented by a class that encapsulates the following syntax:

            operator ( expr, expr, expr )
        """
        # "$not" is special
        if condition.operator == '$not':
            # AND all clauses together
            criterion = sql_anded_together([
                self._compile_condition(c)
                for c in condition.clauses
            ])
            # now negate all of them
            return sa.not_(criterion)
        # "$and", "$or", "$nor" share some steps so they're handled together
        else:
            # Compile expressions
            criteria = [self._compile_condition(c) for c in condition.clauses]

            # Build an expression for $or and $nor
            # "nor" will later be finalized with a negation
            if condition.operator in ('$or', '$nor'):
                cc = sa.or_(*criteria)
            # Build an expression for $and
            elif condition.operator == '$and':
                cc = sa.and_(*criteria)
            # Oops
            else:
                raise exc.PageRequestError(f'Unsupported boolean operator: {condition.operator}')

            # Put parentheses around it when there are multiple clauses
            cc = cc.self_group() if len(criteria) > 1 else cc  # type: ignore[assignment]

            # Finalize $nor: negate the result
            # We do it after it's enclosed into parentheses
            if condition.operator == '$nor':
                return ~cc

            # Done
            return cc

    def _compile_search(self, text: str) -> sa.sql.ColumnElement:
        """ Generate an SQL statement for the text search: ILIKE over every search field, OR-ed together """
        if not self.settings.search_fields:
            raise exc.PageRequestError('Search is not supported here')

        pattern = f'%{escape_like(text)}%'
        return sa.or_(*(
            resolve_column_by_name(name, self.target_Model, where='search').ilike(pattern, escape='\\')
            for name in self.settings.search_fields
        )).self_group()

    def _coerce_value(self, condition: FieldFilterExpression) -> Any:
        """ Convert the operand to the column type """
        value = condition.value

        # Some operators take no column value
        if condition.operator in self.OPERATORS_WITH_RAW_ARGUMENT:
            return value

        try:
            if _is_array(value):
                return [coerce_to_column_type(condition.property, v) for v in value]
            else:
                return coerce_to_column_type(condition.property, value)
        except (ValueError, TypeError, OverflowError) as e:
            raise exc.PageRequestError(f'Filter: invalid value for "{condition.field}": {e}') from e

    def _get_operator_lambda(self, operator: str) -> abc.Callable[[sa.sql.ColumnElement, Any, Any], sa.sql.ColumnElement]:
        """ Get a callable that implements the operator """
        try:
            return self.SCALAR_OPERATORS[operator]
        # Operator not found
        except KeyError:
            raise exc.PageRequestError(f'Unsupported operator: {operator}')

    def _validate_operator_argument(self, condition: FieldFilterExpression):
        """ Validate or fail: that the operation and its arguments make sense

        Raises:
            exc.PageRequestError
        """
        operator = condition.operator

        # See if this operator requires array argument
        if operator in self.OPERATORS_WITH_ARRAY_ARGUMENT:
            if not _is_array(condition.value):
                raise exc.PageRequestError(f'Filter: {operator} argument must be an array')
        # And the other way around
        elif _is_array(condition.value):
            raise exc.PageRequestError(f'Filter: {operator} argument must be a scalar')

        # String operators want strings
        if operator in self.OPERATORS_WITH_STRING_ARGUMENT:
            if not isinstance(condition.value, str):
                raise exc.PageRequestError(f'Filter: {operator} argument must be a string')

    # region Library

    # Operators for scalar columns
    # Mapping:
    #   'operator-name': lambda column, value, original_value
    #   `original_value` is to be used in conditions, because `val` is converted to the column type
    SCALAR_OPERATORS = {
        '$eq': lambda col, val, oval: col == val,
        # "IS DISTINCT FROM" is a better rendering that considers NULLs properly
        '$ne': lambda col, val, oval: col.is_distinct_from(val),
        '$lt': lambda col, val, oval: col < val,
        '$lte': lambda col, val, oval: col <= val,
        '$gt': lambda col, val, oval: col > val,
        '$gte': lambda col, val, oval: col >= val,
        '$prefix': lambda col, val, oval: col.startswith(oval, autoescape=True),
        # case-insensitive substring
        '$ilike': lambda col, val, oval: col.ilike(f'%{escape_like(oval)}%', escape='\\'),
        '$in': lambda col, val, oval: col.in_(val),  # field IN(values)
        '$nin': lambda col, val, oval: col.not_in(val),  # field NOT IN(values)
        '$exists': lambda col, val, oval: col.is_not(None) if oval else col.is_(None),
    }

    # List of operators that always require array argument
    OPERATORS_WITH_ARRAY_ARGUMENT = frozenset(('$in', '$nin'))

    # List of operators that only work with strings
    OPERATORS_WITH_STRING_ARGUMENT = frozenset(('$prefix', '$ilike'))

    # List of operators whose argument is not a column value
    OPERATORS_WITH_RAW_ARGUMENT = frozenset(('$exists', '$prefix', '$ilike'))

    @classmethod
    def add_scalar_operator(cls, name: str, callable: abc.Callable[[sa.sql.ColumnElement, Any, Any], sa.sql.ColumnElement]):
        """ Add an operator to this class

        Subclass FilterOperation first: the operator is only available to this class and its subclasses.

        Args:
            name: Operator name. For instance: $search
            callable: A function that implements the operator.
                Accepts three arguments: column, processed_value, original_value
        """
        cls.SCALAR_OPERATORS = {**cls.SCALAR_OPERATORS, name: callable}

    # endregion


def _is_array(value):
    """ Is the provided value an array of some sorts (list, tuple, set)? """
    return isinstance(value, (list, tuple, set, frozenset))


def escape_like(text: str, escape: str = '\\') -> str:
    """ Escape LIKE wildcards so that the text is matched literally """
    return (
        text
        .replace(escape, escape + escape)
        .replace('%', escape + '%')
        .replace('_', escape + '_')
    )


def sql_anded_together(conditions: list[sa.sql.ColumnElement]) -> Union[sa.sql.ColumnElement, bool]:
    """ Take a list of conditions and join them together using AND. """
    # No conditions: just return True, which is a valid sqlalchemy expression for filtering
    if not conditions:
        return sa.true()

    # AND them together
    cc = sa.and_(*conditions)

    # Put parentheses around it, if necessary
    return cc.self_group() if len(conditions) > 1 else cc
