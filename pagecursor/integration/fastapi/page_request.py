from typing import Optional, Any

import fastapi
import fastapi.responses
import yaml

from pagecursor import PageRequest
from pagecursor import exc


def page_request(*,
        select: Optional[str] = fastapi.Query(
            None,
            title='The list of fields to select.',
            description='Example: `[id, name, created_at]`. JSON or YAML.',
        ),
        filter: Optional[str] = fastapi.Query(
            None,
            title='Filter criteria.',
            description='MongoDB format. Example: `{ status: { $in: [new, open] } }`. JSON or YAML.'
        ),
        search: Optional[str] = fastapi.Query(
            None,
            title='Text to look for.',
        ),
        sort: Optional[str] = fastapi.Query(
            None,
            title='Sorting order',
            description='One column with `+` or `-`. Example: `created_at-`.',
        ),
        limit: Optional[int] = fastapi.Query(
            None,
            title='Pagination. The number of items to include.'
        ),
        cursor: Optional[str] = fastapi.Query(
            None,
            title='Pagination. The opaque cursor from the previous page.'
        ),
) -> PageRequest:
    """ Get the Page Request from the request parameters

    Example:
        /api/applications/?filter={ status: new }&limit=20&cursor=eyJ2YWx1ZSI6...

    Raises:
        exc.PageRequestError
    """
    # Page Request dict
    try:
        page_request_dict = dict(
            select=parse_serialized_argument('select', select),
            filter=parse_serialized_argument('filter', filter),
            search=search,
            sort=sort,
            limit=limit,
            cursor=cursor,
        )
    except ArgumentValueError as e:
        raise exc.PageRequestError(f'`{e.argument_name}` parsing failed: {e}') from e

    # Parse
    return PageRequest.from_page_request(page_request_dict)  # type: ignore[arg-type]


def register_exception_handlers(app: fastapi.FastAPI):
    """ Report Page Request errors to the client as HTTP 400 Bad Request """
    app.add_exception_handler(exc.PageRequestError, _bad_request_handler)
    app.add_exception_handler(exc.InvalidColumnError, _bad_request_handler)


async def _bad_request_handler(request: fastapi.Request, e: Exception) -> fastapi.responses.JSONResponse:
    return fastapi.responses.JSONResponse({'detail': str(e)}, status_code=400)


class ArgumentValueError(ValueError):
    """ Page Request field parse error """
    def __init__(self, argument_name: str, error: str):
        self.argument_name = argument_name
        super().__init__(error)


def parse_serialized_argument(name: str, value: Optional[str]) -> Any:
    """ Parse a flattened Page Request field as YAML

    YAML is a superset of JSON, so both are accepted.
    """
    # None passthrough
    if value is None:
        return None

    # Parse the string
    try:
        return yaml.load(value, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        raise ArgumentValueError(name, str(e))
