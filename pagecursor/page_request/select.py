""" Page Request: the "select" input """

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pagecursor import exc
from pagecursor.typing import SAAttribute

from .base import OperationInputBase


@dataclass
class SelectQuery(OperationInputBase):
    """ Page Request input: the "select" operation

    The list of columns to load. Nothing selected means: every column.
    """
    # Selected fields, in the order of appearance
    fields: list[SelectedField]

    @classmethod
    def from_page_request(cls, select: Optional[list[str]]):  # type: ignore[override]
        if select is None:
            return cls(fields=[])

        # Check types
        if not isinstance(select, list):
            raise exc.PageRequestError('"select" must be an array')
        for name in select:
            if not isinstance(name, str):
                raise exc.PageRequestError(f'Unsupported type encountered in "select": {name!r}')

        # Construct. Duplicates are dropped.
        return cls(fields=[
            SelectedField(name=name, property=None)  # type: ignore[arg-type]
            for name in dict.fromkeys(select)
        ])

    def export(self) -> list[str]:
        return [field.name for field in self.fields]


@dataclass
class SelectedField:
    name: str
    property: SAAttribute  # Is set after resolve() is called

    __slots__ = 'name', 'property'

    def export(self) -> str:
        return self.name
