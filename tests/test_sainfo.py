import datetime
import uuid
from decimal import Decimal

import pytest
import sqlalchemy as sa
import sqlalchemy.orm

from pagecursor.sainfo.columns import coerce_to_column_type, all_columns, resolve_column_by_name
from pagecursor import exc


Base = sa.orm.declarative_base()


class Model(Base):
    __tablename__ = 'm'

    id = sa.Column(sa.Integer, primary_key=True)
    name = sa.Column(sa.String)
    price = sa.Column(sa.Numeric)
    ratio = sa.Column(sa.Float)
    active = sa.Column(sa.Boolean)
    day = sa.Column(sa.Date)
    created_at = sa.Column(sa.DateTime)
    updated_at = sa.Column(sa.DateTime(timezone=True))
    uid = sa.Column(sa.Uuid) if hasattr(sa, 'Uuid') else sa.Column(sa.String)

    @property
    def title(self):
        return self.name


UTC = datetime.timezone.utc


@pytest.mark.parametrize(('column', 'value', 'expected'), [
    # None passes
    ('id', None, None),
    # Numbers
    ('id', 1, 1),
    ('id', '1', 1),
    ('ratio', 1, 1.0),
    ('price', 0.1, Decimal('0.1')),
    ('price', '10.50', Decimal('10.50')),
    # Bools
    ('active', True, True),
    # Strings
    ('name', 'abc', 'abc'),
    ('name', 1, '1'),
    # Dates
    ('day', '2024-05-01', datetime.date(2024, 5, 1)),
    ('created_at', '2024-05-01T10:00:00', datetime.datetime(2024, 5, 1, 10, 0)),
    ('created_at', '2024-05-01T10:00:00.123456', datetime.datetime(2024, 5, 1, 10, 0, 0, 123456)),
    ('created_at', datetime.datetime(2024, 5, 1, 10, 0), datetime.datetime(2024, 5, 1, 10, 0)),
    # A date into a datetime column: midnight
    ('created_at', datetime.date(2024, 5, 1), datetime.datetime(2024, 5, 1, 0, 0)),
    # Aware dates into a naive column: UTC
    ('created_at', '2024-05-01T10:00:00.000Z', datetime.datetime(2024, 5, 1, 10, 0)),
    ('created_at', '2024-05-01T12:00:00+02:00', datetime.datetime(2024, 5, 1, 10, 0)),
    # Aware dates into an aware column: kept
    ('updated_at', '2024-05-01T10:00:00Z', datetime.datetime(2024, 5, 1, 10, 0, tzinfo=UTC)),
])
def test_coerce_to_column_type(column: str, value, expected):
    assert coerce_to_column_type(getattr(Model, column), value) == expected


@pytest.mark.parametrize(('column', 'value'), [
    ('id', 'one'),
    ('id', True),
    ('id', [1]),
    ('id', {'a': 1}),
    ('active', 'yes'),
    ('day', 'tomorrow'),
    ('created_at', 'yesterday'),
    ('created_at', 1),
])
def test_coerce_to_column_type_errors(column: str, value):
    with pytest.raises((ValueError, TypeError)):
        coerce_to_column_type(getattr(Model, column), value)


def test_coerce_uuid():
    if not hasattr(sa, 'Uuid'):
        pytest.skip('SqlAlchemy 2.0 is needed for the Uuid type')

    value = uuid.UUID('12345678-1234-5678-1234-567812345678')
    assert coerce_to_column_type(Model.uid, str(value)) == value


def test_columns():
    """ Column lookup """
    assert [c.key for c in all_columns(Model)] == ['id', 'name', 'price', 'ratio', 'active', 'day', 'created_at', 'updated_at', 'uid']
    assert resolve_column_by_name('name', Model, where='test') is Model.name

    # Aliases
    Alias = sa.orm.aliased(Model)
    assert [c.key for c in all_columns(Alias)][:2] == ['id', 'name']

    # Not a column
    with pytest.raises(exc.InvalidColumnError):
        resolve_column_by_name('title', Model, where='test')
    with pytest.raises(exc.InvalidColumnError):
        resolve_column_by_name('nonexistent', Model, where='test')
