""" Tools for testing """

from .recreate_tables import created_tables
from .recreate_tables import create_tables, drop_tables
from .insert import insert

from .stmt_text import stmt2sql, selected_columns
from .query_logger import QueryCounter, QueryLogger, ExpectedQueryCounter
