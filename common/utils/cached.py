from __future__ import annotations

from typing import Any, Callable


class cached_property:  # noqa
    """Value computed on the first access.

    It's stored in the instance dict under the attribute name,
    so next reads don't go through the descriptor. Deleting the dict entry resets the value.
    """

    def __init__(self, func: Callable[[Any], Any]) -> None:
        self._func = func
        self._name = func.__name__
        self.__doc__ = func.__doc__

    def __set_name__(self, owner: type, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def __get__(self, obj, cls=None):
        if obj is None:
            return self

        value = self._func(obj)
        obj.__dict__[self._name] = value
        return value
