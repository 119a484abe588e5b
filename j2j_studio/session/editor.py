"""Editor collaborator contract.

A studio session does not own an editing widget. It talks to whatever
editor the view provides through this small protocol.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

ChangeCallback = Callable[[str], None]


@runtime_checkable
class Editor(Protocol):
    """What a session needs from an editor widget."""

    read_only: bool

    def get_value(self) -> str: ...

    def set_value(self, text: str) -> None: ...

    def on_change(self, callback: ChangeCallback) -> None: ...


class TextBuffer:
    """In-memory editor: fires change callbacks on every content mutation."""

    def __init__(self, text: str = "", read_only: bool = False) -> None:
        self._text = text
        self.read_only = read_only
        self._callbacks: list[ChangeCallback] = []

    def get_value(self) -> str:
        return self._text

    def set_value(self, text: str) -> None:
        self._text = text
        for callback in list(self._callbacks):
            callback(text)

    def on_change(self, callback: ChangeCallback) -> None:
        self._callbacks.append(callback)
