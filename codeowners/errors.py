"""Exception hierarchy for code owner resolution."""


class CodeOwnersError(RuntimeError):
    """Base exception for code owner resolution failures."""


class InvalidInputError(CodeOwnersError):
    """Raised when a caller passes a missing or malformed parameter."""


class UnknownRevisionError(InvalidInputError):
    """Raised when a revision or branch is not known to the storage."""


class ConfigurationError(CodeOwnersError):
    """Raised when configuration values are invalid."""


class DeclarationParseError(CodeOwnersError):
    """Raised when a declaration file cannot be parsed.

    Carries every message reported by the parser so that callers can surface
    each one individually.
    """

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class StorageUnavailableError(CodeOwnersError):
    """Raised when the versioned storage cannot serve a read."""


class AccountLookupError(CodeOwnersError):
    """Raised when the account directory cannot answer a lookup."""


class ResolutionCancelledError(CodeOwnersError):
    """Raised when a resolution is cancelled or runs past its deadline."""
