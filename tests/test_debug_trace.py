"""Tests for the per-request resolution trace."""

from codeowners.debug_trace import DebugTrace


def test_entries_are_formatted() -> None:
    """Verify arguments are applied with %-formatting."""
    trace = DebugTrace()
    trace.add("inspecting folder %s", "/foo")
    trace.add("no arguments, 100% literal")
    assert trace.entries == ("inspecting folder /foo", "no arguments, 100% literal")


def test_disabled_trace_drops_entries() -> None:
    """Verify a disabled trace records nothing."""
    trace = DebugTrace(enabled=False)
    trace.add("resolved email %s", "admin@example.com")
    assert trace.entries == ()


def test_line_breaks_are_escaped() -> None:
    """Verify content with line breaks still yields one single-line entry."""
    trace = DebugTrace()
    trace.add("cannot resolve code owner email %s: %s", "a\nb@example.com", "x\r\ny")
    assert trace.entries == ("cannot resolve code owner email a\\nb@example.com: x\\r\\ny",)


def test_empty_trace_is_truthy() -> None:
    """Verify an empty trace still counts as a trace in boolean context."""
    assert DebugTrace()
