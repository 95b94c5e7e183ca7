""" Page Request: the parsed input of a paginated list request

Overview:

* PageRequest is the parsed request: select, filter, search, sort, limit, cursor
* Each field is an "input" object parsed by its own class
* resolve_page_request() binds field names to real columns of a model
"""

from .page_request import PageRequest, PageRequestDict
from .select import SelectQuery, SelectedField
from .filter import FilterQuery, SearchQuery, FilterExpressionBase, FieldFilterExpression, BooleanFilterExpression
from .sort import SortQuery, SortingField, SortingDirection
from .pager import LimitQuery, CursorQuery
from .resolve import resolve_page_request
