import pytest
import sqlalchemy as sa
import sqlalchemy.orm

from pagecursor import Query, QuerySettings, PageRequest, fetch_page
from pagecursor.testing.insert import insert
from pagecursor.testing.query_logger import QueryCounter, ExpectedQueryCounter
from pagecursor.testing.recreate_tables import created_tables

from .util.models import ApplicationMixin, applications


def test_fetch_page_one_query(engine: sa.engine.Engine, connection: sa.engine.Connection):
    """ Every page costs exactly one query """
    # Models
    Base = sa.orm.declarative_base()

    class Model(ApplicationMixin, Base):
        __tablename__ = 'a'

    # Data
    with created_tables(connection, Base):
        insert(connection, Model, applications(25))

        with QueryCounter(engine) as counter:
            page = fetch_page(connection, Model, limit=10)
        assert counter.n == 1

        with ExpectedQueryCounter(engine, 1, 'Second page'):
            fetch_page(connection, Model, limit=10, cursor=page.meta.next_cursor)


def test_query(connection: sa.engine.Connection):
    """ Query: prepare, fetch, page meta, count """
    # Models
    Base = sa.orm.declarative_base()

    class Model(ApplicationMixin, Base):
        __tablename__ = 'a'

    settings = QuerySettings(default_limit=10)
    query_applications = Query.prepare(Model, settings)

    # Data
    with created_tables(connection, Base):
        insert(connection, Model, applications(25))

        # Prepared query
        q = query_applications({'filter': {'id': {'$lte': 15}}})
        assert q.limit == 10

        # Page meta is only known after the query is executed
        with pytest.raises(RuntimeError):
            q.page_meta()

        page = q.fetch_page(connection)
        assert [row['id'] for row in page.items] == list(range(15, 5, -1))
        assert q.page_meta() == page.meta
        assert page.meta.has_next_page is True

        # Count: filter applies, the cursor does not
        q = query_applications({'filter': {'id': {'$lte': 15}}, 'cursor': page.meta.next_cursor})
        assert q.count(connection) == 15
        assert len(q.fetch_page(connection).items) == 5

        # PageRequest object
        request = PageRequest.from_page_request({'limit': 5})
        page = query_applications(request).fetch_page(connection)
        assert len(page.items) == 5

        # No request at all
        page = Query(None, Model).fetch_page(connection)
        assert len(page.items) == 20


def test_fetch_page_fields(connection: sa.engine.Connection):
    """ fetch_page(): keyword fields override the request """
    # Models
    Base = sa.orm.declarative_base()

    class Model(ApplicationMixin, Base):
        __tablename__ = 'a'

    # Data
    with created_tables(connection, Base):
        insert(connection, Model, applications(5))

        page = fetch_page(connection, Model, {'limit': 1, 'sort': 'id+'}, limit=2)
        assert [row['id'] for row in page.items] == [1, 2]

        request = PageRequest.from_page_request({'limit': 1, 'sort': 'id+'})
        page = fetch_page(connection, Model, request, limit=3)
        assert [row['id'] for row in page.items] == [1, 2, 3]


def test_customize_results(connection: sa.engine.Connection):
    """ Result handlers see the rows after the pager has trimmed them """
    # Models
    Base = sa.orm.declarative_base()

    class Model(ApplicationMixin, Base):
        __tablename__ = 'a'

    class UppercaseSettings(QuerySettings):
        def customize_result(self, query, rows):
            return [{**row, 'name': row['name'].upper()} for row in rows]

    # Data
    with created_tables(connection, Base):
        insert(connection, Model, applications(3))

        page = fetch_page(connection, Model, select=['name'], limit=2, settings=UppercaseSettings())
        assert [row['name'] for row in page.items] == ['APP-3', 'APP-2']
        assert page.meta.has_next_page is True


def test_request_reused(connection: sa.engine.Connection):
    """ One PageRequest object, several queries: the request is not modified """
    # Models
    Base = sa.orm.declarative_base()

    class Model(ApplicationMixin, Base):
        __tablename__ = 'a'

    # Data
    with created_tables(connection, Base):
        insert(connection, Model, applications(5))

        request = PageRequest.from_page_request({'limit': 2})

        page = fetch_page(connection, Model, request, settings=QuerySettings(default_sort='id+'))
        assert [row['id'] for row in page.items] == [1, 2]

        page = fetch_page(connection, Model, request, settings=QuerySettings(default_sort='id-'))
        assert [row['id'] for row in page.items] == [5, 4]

        # The default sort did not stick
        assert request.sort.field is None
        assert request.dict()['sort'] is None

        # Each query resolves its own copy
        q = Query(request, Model)
        assert q.request is not request
        assert q.request.sort.field.property is not None


def test_datastore_errors_propagate(connection: sa.engine.Connection):
    """ Database errors are not caught """
    # Models
    Base = sa.orm.declarative_base()

    class Model(ApplicationMixin, Base):
        __tablename__ = 'a'

    # No tables created
    with pytest.raises(sa.exc.DBAPIError):
        fetch_page(connection, Model)
