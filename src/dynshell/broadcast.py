"""Single-slot register holding the continuation of the last displayed page."""

from typing import Any

from .pagination import Continuation, ResumablePage


class ContinuationSlot:
    """
    Holds the continuation of the most recently displayed value.

    The display path calls :meth:`publish` for every value it shows; the
    ``it`` command calls :meth:`resume`. Only a ResumablePage with a
    continuation fills the slot, any other value empties it.
    """

    def __init__(self) -> None:
        self._continuation: Continuation | None = None

    @property
    def has_next(self) -> bool:
        return self._continuation is not None

    def publish(self, value: Any) -> None:
        """Record the continuation of ``value``, or clear the slot."""
        if isinstance(value, ResumablePage):
            self._continuation = value.next
        else:
            self._continuation = None

    def resume(self) -> ResumablePage | None:
        """
        Fetch the next page of the last displayed result.

        Returns None without doing anything when the slot is empty. If the
        fetch fails the slot keeps its continuation.
        """
        if self._continuation is None:
            return None
        return self._continuation()

    def clear(self) -> None:
        self._continuation = None


# Process-wide slot shared by the shell's display hook and the ``it`` command
slot = ContinuationSlot()
