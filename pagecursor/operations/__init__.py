""" Operations that implement Page Request operations

* select: select columns
* filter: filter conditions and text search
* sort: define the order
* pager: paginate with cursors
"""

from .select import SelectOperation
from .filter import FilterOperation
from .sort import SortOperation

from .pager import PagerOperation, Page, PageMeta
