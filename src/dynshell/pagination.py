"""
Resumable scan/query results.

A :class:`ResumablePage` behaves like the list of items returned by one page
of a scan or query. When the service reported a ``LastEvaluatedKey`` it also
carries a continuation that fetches the next page. The continuation is kept
out of iteration, equality and ``repr`` so pages print like plain lists.

Example:
    page = table.scan(Limit=25)
    for item in page:
        print(item)
    if page.has_next:
        page = page.resume()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any, overload

from .exceptions import LocalLogicError

logger = logging.getLogger(__name__)

CURSOR_PARAM = "ExclusiveStartKey"

Continuation = Callable[[], "ResumablePage"]


class ResumablePage(Sequence[dict[str, Any]]):
    """One page of items plus an optional hidden continuation."""

    __slots__ = ("_items", "_next")

    def __init__(
        self,
        items: Sequence[dict[str, Any]] | None = None,
        next: Continuation | None = None,  # noqa: A002
    ) -> None:
        self._items: list[dict[str, Any]] = list(items or [])
        self._next = next

    @property
    def items(self) -> list[dict[str, Any]]:
        return self._items

    @property
    def next(self) -> Continuation | None:
        """The continuation, or None when this page is terminal."""
        return self._next

    @property
    def has_next(self) -> bool:
        return self._next is not None

    def resume(self) -> ResumablePage:
        """Fetch the page after this one."""
        if self._next is None:
            raise LocalLogicError("Cannot resume a terminal page")
        return self._next()

    @overload
    def __getitem__(self, index: int) -> dict[str, Any]: ...

    @overload
    def __getitem__(self, index: slice) -> list[dict[str, Any]]: ...

    def __getitem__(self, index: int | slice) -> Any:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResumablePage):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return repr(self._items)


def resumable(
    fetch: Callable[[dict[str, Any]], ResumablePage],
    params: Mapping[str, Any],
    response: Mapping[str, Any],
) -> ResumablePage:
    """
    Wrap one scan/query response as a ResumablePage.

    If the response carries a non-empty ``LastEvaluatedKey``, the page gets a
    continuation that calls ``fetch`` again with a copy of ``params`` whose
    ``ExclusiveStartKey`` is that key. ``fetch`` must be the same operation
    that produced ``response``. An empty page with a cursor is not terminal.

    Args:
        fetch: The scan or query operation to repeat
        params: Parameters that produced ``response``
        response: The page response

    Returns:
        ResumablePage with the page's items
    """
    items = response.get("Items") or []
    cursor = response.get("LastEvaluatedKey")
    if not cursor:
        return ResumablePage(items)

    next_params = {**params, CURSOR_PARAM: cursor}

    def _next() -> ResumablePage:
        logger.debug("Resuming from %s=%r", CURSOR_PARAM, cursor)
        return fetch(dict(next_params))

    return ResumablePage(items, next=_next)
