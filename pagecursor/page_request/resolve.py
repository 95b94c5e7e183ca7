""" Tools to resolve a Page Request to actual columns

When a PageRequest is created, it just remembers field names, but does not yet know
whether these columns exist. When a Page Request is "resolved",
every field it mentions gets the column attribute it refers to.
"""

from __future__ import annotations

from functools import singledispatch

from pagecursor.sainfo.columns import resolve_column_by_name
from pagecursor.typing import SAModelOrAlias

from .page_request import PageRequest
from .select import SelectQuery
from .sort import SortQuery
from .filter import FilterQuery, FieldFilterExpression, BooleanFilterExpression


@singledispatch
def resolve(_, Model: SAModelOrAlias):
    """ Resolve input: a Page Request, or any of its operation's inputs

    Supports:
    * Page Request
    * Select operation
    * Sort operation
    * Filter operation
    """
    raise NotImplementedError(_)


@resolve.register
def resolve_page_request(request: PageRequest, Model: SAModelOrAlias):
    # Resolve every operation
    resolve_select(request.select, Model)
    resolve_sort(request.sort, Model)
    resolve_filter(request.filter, Model)


@resolve.register
def resolve_select(select: SelectQuery, Model: SAModelOrAlias):
    for field in select.fields:
        field.property = resolve_column_by_name(field.name, Model, where='select')


@resolve.register
def resolve_sort(sort: SortQuery, Model: SAModelOrAlias):
    # No sort field is fine: the default one will be used
    if sort.field is not None:
        sort.field.property = resolve_column_by_name(sort.field.name, Model, where='sort')


@resolve.register
def resolve_filter(filter: FilterQuery, Model: SAModelOrAlias):
    # Resolve every filtering condition
    for condition in filter.conditions:
        resolve(condition, Model)


@resolve.register
def resolve_filtering_boolean_expression(expression: BooleanFilterExpression, Model: SAModelOrAlias):
    # It might be a filter or a boolean expression
    for clause in expression.clauses:
        resolve(clause, Model)


@resolve.register
def resolve_filtering_field_expression(expression: FieldFilterExpression, Model: SAModelOrAlias):
    expression.property = resolve_column_by_name(expression.field, Model, where='filter')
