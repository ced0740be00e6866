"""Selection of the declaration grammar."""

from typing import Protocol

from codeowners.declaration import DeclarationKey, OwnershipDeclaration
from codeowners.errors import ConfigurationError
from codeowners.find_owners_parser import FindOwnersBackend
from codeowners.yaml_parser import YamlBackend


class Backend(Protocol):
    """A concrete declaration grammar."""

    name: str
    file_name: str

    def parse(
        self, content: bytes | str, key: DeclarationKey, revision: str | None = None
    ) -> OwnershipDeclaration:
        """Raises DeclarationParseError if the content is invalid."""
        ...

    def format_declaration(self, declaration: OwnershipDeclaration) -> str:
        ...


BACKENDS: dict[str, Backend] = {
    FindOwnersBackend.name: FindOwnersBackend(),
    YamlBackend.name: YamlBackend(),
}


def get_backend(name: str) -> Backend:
    """Return the backend registered under ``name``."""
    try:
        return BACKENDS[name]
    except KeyError:
        raise ConfigurationError(
            f"unknown backend '{name}', expected one of {sorted(BACKENDS)}"
        ) from None
