import pytest
import sqlalchemy as sa
import sqlalchemy.orm

from pagecursor import PageRequest, exc
from pagecursor.page_request import SortingDirection

from .util.models import ApplicationMixin


def test_page_request_parse():
    """ Parse a Page Request, export it back """
    request = PageRequest.from_page_request({
        'select': ['id', 'name'],
        'filter': {
            '$or': [
                {'status': 'new'},
                {'status': 'open'},
            ],
            'id': {'$gt': 1, '$lt': 10},
        },
        'search': '  alice ',
        'sort': 'created_at-',
        'limit': 10,
        'cursor': 'eyJ2YWx1ZSI6MX0=',
    })

    # Parsed
    assert [field.name for field in request.select.fields] == ['id', 'name']
    assert request.search.text == 'alice'
    assert request.sort.name == 'created_at'
    assert request.sort.field.direction == SortingDirection.DESC
    assert request.sort.field.is_desc
    assert request.limit.limit == 10
    assert request.cursor.cursor == 'eyJ2YWx1ZSI6MX0='

    # Exported
    assert request.dict() == {
        'select': ['id', 'name'],
        'filter': {
            '$or': [
                {'status': {'$eq': 'new'}},
                {'status': {'$eq': 'open'}},
            ],
            'id': {'$gt': 1, '$lt': 10},
        },
        'search': 'alice',
        'sort': 'created_at-',
        'limit': 10,
        'cursor': 'eyJ2YWx1ZSI6MX0=',
    }

    # Round-trip
    assert PageRequest.from_page_request(request.dict()).dict() == request.dict()


def test_page_request_empty():
    """ Empty Page Request: every field is empty """
    request = PageRequest.ensure_page_request(None)
    assert request.dict() == {
        'select': [],
        'filter': {},
        'search': None,
        'sort': None,
        'limit': None,
        'cursor': None,
    }

    # ensure_page_request() passes objects through
    assert PageRequest.ensure_page_request(request) is request
    assert PageRequest.ensure_page_request({'limit': 5}).limit.limit == 5


@pytest.mark.parametrize(('input', 'expected_error'), [
    # Not an object
    ('limit=5', exc.PageRequestError),
    # Unknown keys
    ({'skip': 10}, exc.PageRequestError),
    ({'after': 'abc'}, exc.PageRequestError),
    # Bad values
    ({'limit': 0}, exc.PageRequestError),
    ({'limit': 1.5}, exc.PageRequestError),
    ({'sort': ['a', 'b']}, exc.PageRequestError),
    ({'sort': ''}, None),
    ({'cursor': 1}, exc.PageRequestError),
    ({'search': ['a']}, exc.PageRequestError),
])
def test_page_request_errors(input, expected_error):
    """ Invalid inputs """
    if expected_error is None:
        PageRequest.ensure_page_request(input)
    else:
        with pytest.raises(expected_error):
            PageRequest.ensure_page_request(input)


def test_page_request_resolve():
    """ Resolve: field names become columns """
    # Models
    Base = sa.orm.declarative_base()

    class Model(ApplicationMixin, Base):
        __tablename__ = 'a'

    request = PageRequest.from_page_request({
        'select': ['name'],
        'filter': {'$not': {'status': 'new'}},
        'sort': 'id+',
    }).resolve(Model)

    assert request.select.fields[0].property is Model.name
    assert request.sort.field.property is Model.id
    assert request.filter.conditions[0].clauses[0].property is Model.status

    # Unknown column
    with pytest.raises(exc.InvalidColumnError) as e:
        PageRequest.from_page_request({'sort': 'nope-'}).resolve(Model)
    assert e.value.column_name == 'nope'
    assert e.value.where == 'sort'
