"""Label formatters for graph export."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Formatter(Protocol):
    """Turns leaf data or a node digest into a display label."""

    def format(self, data: bytes) -> str: ...


class StringFormatter:
    """Renders bytes as UTF-8 text."""

    def format(self, data: bytes) -> str:
        return data.decode("utf-8", errors="replace")


class HexFormatter:
    """Renders bytes as full lower-case hex."""

    def format(self, data: bytes) -> str:
        return data.hex()


class TruncatedHexFormatter:
    """Renders the first and last four hex characters, e.g. ``7b50…c81f``."""

    def format(self, data: bytes) -> str:
        if len(data) < 2:
            return data.hex()
        return f"{data[:2].hex()}…{data[-2:].hex()}"


_FORMATTER_MAP: dict[str, type] = {
    "string": StringFormatter,
    "hex": HexFormatter,
    "truncated": TruncatedHexFormatter,
}


def create_formatter(name: str) -> Formatter:
    cls = _FORMATTER_MAP.get(name)
    if cls is None:
        raise ValueError(
            f"Unsupported formatter: {name!r}. Supported: {', '.join(_FORMATTER_MAP)}"
        )
    return cls()
