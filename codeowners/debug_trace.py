"""Per-request sink for the human-readable resolution trace."""

import logging

logger = logging.getLogger(__name__)


def _single_line(text: str) -> str:
    return text.replace("\r", "\\r").replace("\n", "\\n")


class DebugTrace:
    """Collects single-line explanations of every resolution decision.

    One instance is created per request and passed explicitly to every
    component; a disabled trace drops entries but still mirrors them to the
    debug log. Line breaks coming from declaration content are escaped, so
    every entry stays on one line.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._entries: list[str] = []

    def add(self, message: str, *args: object) -> None:
        """Record one entry; ``args`` are applied with %-formatting."""
        text = _single_line(message % args if args else message)
        logger.debug("%s", text)
        if self.enabled:
            self._entries.append(text)

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)
