from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from functools import cache
from typing import Any, Optional

import sqlalchemy as sa
from sqlalchemy import TypeDecorator
from sqlalchemy.orm import ColumnProperty
from sqlalchemy.orm import (  # type: ignore[attr-defined]  # sqlalchemy stubs not updated
    InstrumentedAttribute,
    MapperProperty,
)

from pagecursor.sainfo.names import model_name
from pagecursor.typing import SAModelOrAlias, SAAttribute
from pagecursor import exc
from pagecursor.util.dates import parse_datetime


def resolve_column_by_name(field_name: str, Model: SAModelOrAlias, *, where: str) -> InstrumentedAttribute:
    # As simple as it looks, this code invokes __getattr__() on sa.orm.AliasedClass which adapts the SQL expression
    # to make sure it uses the proper aliased name in queries
    try:
        attribute = getattr(Model, field_name)
    except AttributeError as e:
        raise exc.InvalidColumnError(model_name(Model), field_name, where=where) from e

    # Check that it actually is a column
    if not is_column_property(attribute):
        raise exc.InvalidColumnError(model_name(Model), field_name, where=where)

    # Done
    return attribute


def all_columns(Model: SAModelOrAlias) -> list[InstrumentedAttribute]:
    """ Get every column attribute of a model, in the order of declaration """
    mapper = sa.inspect(Model).mapper
    return [
        getattr(Model, prop.key)
        for prop in mapper.column_attrs
        if isinstance(prop.expression, sa.Column)
    ]


# region: Column Attribute types

@cache
def is_column_property(attribute: SAAttribute):
    return (
        isinstance(attribute, (InstrumentedAttribute, MapperProperty)) and
        isinstance(attribute.property, ColumnProperty) and
        isinstance(attribute.expression, sa.Column)  # not an expression, but a real column
    )

# endregion


# region Column Attribute info

@cache
def get_column_type(attribute: SAAttribute) -> sa.types.TypeEngine:
    """ Get column's SQL type """
    if isinstance(attribute.type, TypeDecorator):
        # Type decorators wrap other types, so we have to handle them carefully
        return attribute.type.impl
    else:
        return attribute.type


@cache
def get_python_type(attribute: SAAttribute) -> Optional[type]:
    """ Get the Python type that column values are loaded as, if SqlAlchemy knows it """
    try:
        return get_column_type(attribute).python_type
    except NotImplementedError:
        return None

# endregion


# region Column values

def coerce_to_column_type(attribute: SAAttribute, value: Any) -> Any:
    """ Convert a JSON value into the Python type that the column expects

    JSON has no dates, so they come in as ISO-8601 strings.
    SqlAlchemy would not accept strings for date columns with some drivers (e.g. SQLite).

    Raises:
        ValueError, TypeError: the value cannot be converted
    """
    if value is None:
        return None

    # Objects and arrays are never a column value
    if isinstance(value, (dict, list)):
        raise TypeError(f'Expected a scalar, {type(value).__name__} given')

    python_type = get_python_type(attribute)

    # Unknown type? Pass it through. Let the driver decide.
    if python_type is None:
        return value
    # Dates and times
    elif python_type is datetime.datetime:
        if isinstance(value, str):
            value = parse_datetime(value)
        # A date is midnight of that day. `datetime` is a `date` too
        elif isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
            value = datetime.datetime.combine(value, datetime.time())
        elif not isinstance(value, datetime.datetime):
            raise TypeError(f'Expected a datetime, {type(value).__name__} given')
        return _adjust_timezone(attribute, value)
    elif python_type is datetime.date:
        if isinstance(value, str):
            return datetime.date.fromisoformat(value)
        elif not isinstance(value, datetime.date):
            raise TypeError(f'Expected a date, {type(value).__name__} given')
        return value
    # Numbers. `bool` is an `int`, but nobody means it
    elif python_type in (int, float, Decimal):
        if isinstance(value, bool):
            raise TypeError('Expected a number, bool given')
        # Decimal(0.1) would keep the float's binary noise
        return Decimal(str(value)) if python_type is Decimal else python_type(value)
    elif python_type is bool:
        if not isinstance(value, bool):
            raise TypeError(f'Expected a bool, {type(value).__name__} given')
        return value
    elif python_type is uuid.UUID:
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    elif python_type is str:
        return value if isinstance(value, str) else str(value)
    # Enums and the rest
    else:
        return value


def _adjust_timezone(attribute: SAAttribute, value: datetime.datetime) -> datetime.datetime:
    """ Make the datetime match the column: naive columns are assumed to store UTC """
    column_type = get_column_type(attribute)
    if value.tzinfo is not None and not getattr(column_type, 'timezone', True):
        return value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return value

# endregion
