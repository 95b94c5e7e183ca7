""" Execute a Page Request: everything needed to execute it

Overview:

* Query is the high-level interface to Page Request execution
* QueryExecutor is the low-level interface.
  The difference is minimal: it lacks some non-essential features.
* fetch_page() loads one page in one call
"""

from .query import Query, fetch_page
from .settings import QuerySettings

from .query_executor import QueryExecutor
from .query_executor import CustomizeResultsCallable, CustomizeStatementCallable
