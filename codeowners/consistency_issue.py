"""Diagnostics reported by consistency checks."""

from dataclasses import dataclass
from enum import IntEnum


class Severity(IntEnum):
    """Issue severity; higher values are more severe."""

    WARNING = 1
    ERROR = 2
    FATAL = 3


@dataclass(frozen=True)
class ConsistencyIssue:
    """One problem found in a declaration file."""

    file_path: str
    severity: Severity
    message: str

    @classmethod
    def fatal(cls, file_path: str, message: str) -> "ConsistencyIssue":
        return cls(file_path, Severity.FATAL, message)

    @classmethod
    def error(cls, file_path: str, message: str) -> "ConsistencyIssue":
        return cls(file_path, Severity.ERROR, message)


def invalid_file_issue(file_path: str, parser_message: str) -> ConsistencyIssue:
    """Build the FATAL issue reported for an unparsable declaration file."""
    return ConsistencyIssue.fatal(
        file_path, f"invalid code owner config file '{file_path}': {parser_message}"
    )
