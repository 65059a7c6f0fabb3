"""Small helpers for tagging unfinished code and rendering debug strings."""

from __future__ import annotations

from typing import NoReturn, Protocol, runtime_checkable


class UnsupportedOperationError(RuntimeError):
    """Raised by code paths that exist but are not supported yet."""


def not_implemented_yet(reason: str, link: str = "") -> NoReturn:
    """
    Mark code that still has to be written.

    Args:
        reason: Why the code is not implemented.
        link: Optional issue link or ID with more details.

    Raises:
        NotImplementedError: always.
    """
    raise NotImplementedError(f"{reason}: {link}")


def not_supported_yet(reason: str, link: str = "") -> NoReturn:
    """Mark a code path that is reachable but not supported."""
    raise UnsupportedOperationError(f"{reason}: {link}")


@runtime_checkable
class DebugDisplay(Protocol):
    """Anything that can render a programmer-facing description of itself."""

    def to_debug_display(self) -> str: ...


def debug_display(obj: object) -> str:
    if isinstance(obj, DebugDisplay):
        return obj.to_debug_display()
    return repr(obj)
