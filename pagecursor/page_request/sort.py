""" Page Request: the "sort" input """

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pagecursor import exc
from pagecursor.typing import SAAttribute

from .base import OperationInputBase


@dataclass
class SortQuery(OperationInputBase):
    """ Page Request input: the "sort" operation

    Cursor pagination compares rows against a single value, so exactly one field can be sorted by.

    Syntax:
        "created_at-"   DESC
        "created_at+"   ASC
        "created_at"    ASC
    """
    # The field to sort by, if any
    # When not given, the default sort from QuerySettings is used
    field: Optional[SortingField]

    @classmethod
    def from_page_request(cls, sort: Union[str, list[str], None]):  # type: ignore[override]
        # Nothing?
        if not sort:
            return cls(field=None)

        # Lists are accepted for compatibility with clients that always send them
        if isinstance(sort, list):
            if len(sort) != 1:
                raise exc.PageRequestError('"sort" supports exactly one field with cursor pagination')
            sort = sort[0]

        # Check types
        if not isinstance(sort, str):
            raise exc.PageRequestError('"sort" must be a string')

        # Construct
        return cls(field=cls._parse_input_field(sort))

    def export(self) -> Optional[str]:
        return self.field.export() if self.field else None

    @property
    def name(self) -> Optional[str]:
        """ Name of the field to sort by """
        return self.field.name if self.field else None

    @staticmethod
    def _parse_input_field(field: str) -> SortingField:
        """ Parse a field string into a SortingField object """
        # Look at the ending character
        end_c = field[-1:]

        # If there's a sorting character, use it
        if end_c == '-' or end_c == '+':
            name = field[:-1]
            direction = SortingDirection(end_c)
        # Otherwise, use default sorting
        else:
            name = field
            direction = SortingDirection.ASC

        # Spaces: "+" in a URL that nobody has escaped
        name = name.strip()
        if not name:
            raise exc.PageRequestError(f'"sort" has no field name: {field!r}')

        return SortingField(name=name, direction=direction, property=None)  # type: ignore[arg-type]


@dataclass
class SortingField:
    name: str
    direction: SortingDirection
    property: SAAttribute  # Is set after resolve() is called

    __slots__ = 'name', 'direction', 'property'

    def export(self) -> str:
        return f'{self.name}{self.direction.value}'

    @property
    def is_desc(self) -> bool:
        return self.direction == SortingDirection.DESC


class SortingDirection(Enum):
    ASC = '+'
    DESC = '-'
