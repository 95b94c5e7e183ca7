""" Page Request: the "filter" and "search" inputs """

from __future__ import annotations

import itertools
from collections import abc
from dataclasses import dataclass
from typing import Any, Optional, Union

from pagecursor import exc
from pagecursor.typing import SAAttribute
from pagecursor.util.funcy import collecting

from .base import OperationInputBase


@dataclass
class FilterQuery(OperationInputBase):
    """ Page Request input: the "filter" operation

    MongoDB-style conditions:

        { status: "pending" }
        { created_at: { $gte: "2024-01-01" } }
        { $or: [ { status: "pending" }, { status: "approved" } ] }
    """
    # List of conditions: field conditions and/or boolean conditions
    conditions: list[FilterExpressionBase]

    @classmethod
    def from_page_request(cls, filter: Optional[dict]):  # type: ignore[override]
        # Nothing?
        if filter is None:
            return cls(conditions=[])

        # Check types
        if not isinstance(filter, dict):
            raise exc.PageRequestError('"filter" must be an object')

        # Construct
        conditions = cls._parse_input_fields(filter)
        return cls(conditions=conditions)

    def export(self) -> dict:
        res = {}
        for condition in self.conditions:
            for key, value in condition.export().items():
                # Several operators on one field: merge them back together
                if key in res and isinstance(value, dict):
                    res[key].update(value)
                else:
                    res[key] = value
        return res

    @classmethod
    @collecting
    def _parse_input_fields(cls, condition: dict) -> abc.Iterator[FilterExpressionBase]:
        # Iterate the object
        for key, value in condition.items():
            # If a key starts with $ ($and, $or, ...), it is a boolean expression
            if key.startswith('$'):
                yield cls._parse_input_boolean_expression(key, value)
            # If not, then it's a field expression
            else:
                yield from cls._parse_input_field_expressions(key, value)

    @classmethod
    def _parse_input_field_expressions(cls, field_name: str, value: Union[dict[str, Any], Any]):
        # If the value is not a dict, it's a shortcut: { key: value }
        if not isinstance(value, dict):
            yield FieldFilterExpression(field=field_name, operator='$eq', value=value, property=None)  # type: ignore[arg-type]
        # If the value is a dict, every item will be an operator and an operand
        else:
            for operator, operand in value.items():
                yield FieldFilterExpression(field=field_name, operator=operator, value=operand, property=None)  # type: ignore[arg-type]

    @classmethod
    def _parse_input_boolean_expression(cls, operator: str, conditions: Union[dict, list[dict]]):
        # Check operator names early: a typo should not turn into a field name
        if operator not in BOOLEAN_OPERATORS:
            raise exc.PageRequestError(f'Unsupported boolean operator: {operator}')

        # Check types
        # $not is the only unary operator
        if operator == '$not':
            if not isinstance(conditions, dict):
                raise exc.PageRequestError(f"{operator}'s operand must be an object")

            conditions = [conditions]
        # Every other operator receives a list of conditions
        else:
            if not isinstance(conditions, list) or not all(isinstance(c, dict) for c in conditions):
                raise exc.PageRequestError(f"{operator}'s operand must be an array of objects")

        # Construct
        return BooleanFilterExpression(
            operator=operator,
            clauses=list(itertools.chain.from_iterable(
                cls._parse_input_fields(condition)
                for condition in conditions
            ))
        )


class FilterExpressionBase:
    """ Base class for filter expressions """

    def export(self) -> dict:
        raise NotImplementedError


@dataclass
class FieldFilterExpression(FilterExpressionBase):
    """ A filter for a field

    Example:
        { status: {$eq: "pending"} }
    """
    field: str
    operator: str
    value: Any
    property: SAAttribute  # Is set after resolve() is called

    __slots__ = 'field', 'operator', 'value', 'property'

    def export(self) -> dict:
        return {self.field: {self.operator: self.value}}


@dataclass
class BooleanFilterExpression(FilterExpressionBase):
    """ A filter with a boolean expression

    Example:
        { $or: [ ..., ... ] }
    """
    operator: str
    clauses: list[FilterExpressionBase]

    __slots__ = 'operator', 'clauses'

    def export(self) -> dict:
        # $not has a single object as its operand
        if self.operator == '$not':
            res: dict = {}
            for clause in self.clauses:
                res.update(clause.export())
            return {self.operator: res}

        return {
            self.operator: [
                clause.export()
                for clause in self.clauses
            ]
        }


@dataclass
class SearchQuery(OperationInputBase):
    """ Page Request input: the "search" operation

    Case-insensitive substring search over the columns listed in `QuerySettings.search_fields`
    """
    # The text to look for
    text: Optional[str]

    @classmethod
    def from_page_request(cls, search: Optional[str]):  # type: ignore[override]
        if search is None:
            return cls(text=None)
        elif not isinstance(search, str):
            raise exc.PageRequestError('"search" must be a string')

        # Blank search is no search
        search = search.strip()
        return cls(text=search or None)

    def export(self) -> Optional[str]:
        return self.text


# List of boolean operators that operate on multiple conditional clauses
BOOLEAN_OPERATORS = frozenset(('$and', '$or', '$nor', '$not'))
