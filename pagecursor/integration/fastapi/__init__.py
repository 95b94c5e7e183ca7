""" FastAPI integration: get a Page Request from query parameters, return pages as JSON """

from .page_request import page_request, register_exception_handlers
from .response import PageResponse, PageMetaResponse
