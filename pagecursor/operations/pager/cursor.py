""" Opaque cursors: encode and decode the position of the last row on a page

The wire format is JSON, then base64:

    base64('{"value":"2024-05-01T10:00:00.000Z"}')

This is exactly what `Buffer.from(JSON.stringify(data)).toString('base64')` produces,
so tokens issued by other implementations remain valid.
"""

from __future__ import annotations

import base64
import datetime
import json
import logging
import uuid
from decimal import Decimal
from typing import Any, NamedTuple, Optional, Union

from pagecursor.util.dates import format_datetime


logger = logging.getLogger(__name__)


class CursorPosition(NamedTuple):
    """ Cursor data: the position to resume from """
    # Sort field value of the last row seen
    value: Any

    # Tie-break column value of the last row seen.
    # Only present when the query uses a tie-break column.
    id: Any = None

    def serialize(self) -> dict:
        data = {'value': jsonable(self.value)}
        if self.id is not None:
            data['id'] = jsonable(self.id)
        return data

    def encode(self) -> str:
        return encode_opaque_cursor(self.serialize())

    @classmethod
    def decode(cls, cursor: Optional[str]) -> CursorPosition:
        """ Decode a cursor. Never fails: a bad cursor gives a position with no value """
        if not cursor:
            return NULL_POSITION

        try:
            data = decode_opaque_cursor(cursor)
        except ValueError as e:
            logger.debug('Ignoring an invalid cursor %r: %s', cursor, e)
            return NULL_POSITION

        return cls(value=data.get('value'), id=data.get('id'))


# A position that points nowhere: start from the first page
NULL_POSITION = CursorPosition(value=None)


def encode_cursor(position: Union[CursorPosition, dict, Any]) -> str:
    """ Encode a position as an opaque cursor

    Args:
        position: CursorPosition, a dict like {'value': ...}, or a bare sort field value
    """
    if isinstance(position, CursorPosition):
        return position.encode()
    elif isinstance(position, dict):
        return CursorPosition(value=position.get('value'), id=position.get('id')).encode()
    else:
        return CursorPosition(value=position).encode()


def decode_cursor(cursor: Optional[str]) -> CursorPosition:
    """ Decode an opaque cursor into a position

    Never raises: a malformed, truncated or tampered cursor gives CursorPosition(value=None),
    which means "start from the first page".
    """
    return CursorPosition.decode(cursor)


def encode_opaque_cursor(data: dict) -> str:
    """ Encode a dict of data as an opaque cursor """
    # Compact separators and raw unicode: byte-for-byte the same as JSON.stringify()
    payload = json.dumps(data, separators=(',', ':'), ensure_ascii=False)
    return base64.b64encode(payload.encode('utf-8')).decode('ascii')


def decode_opaque_cursor(cursor: str) -> dict:
    """ Decode an opaque cursor into a data dict

    Raises:
        ValueError: all sorts of errors related to bad cursor
    """
    if not isinstance(cursor, str):
        raise ValueError(f'Cursor must be a string, {type(cursor).__name__} given')

    payload = base64.b64decode(cursor)  # binascii.Error
    data = json.loads(payload.decode('utf-8'))  # UnicodeDecodeError, json.JSONDecodeError

    if not isinstance(data, dict):
        raise ValueError(f'Cursor must contain an object, {type(data).__name__} found')

    return data


def jsonable(value: Any) -> Any:
    """ Convert a sort field value into something JSON can hold """
    if isinstance(value, datetime.datetime):
        return format_datetime(value)
    elif isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    elif isinstance(value, (Decimal, uuid.UUID)):
        return str(value)
    else:
        return value

