"""Parser and formatter for the line-based ``OWNERS`` grammar.

Supported lines::

    # comment
    set noparent
    jane@example.com  #{LAST_RESORT_SUGGESTION}
    *
    per-file *.md,docs/**=jane@example.com,john@example.com
    per-file BUILD=set noparent
    per-file *.proto=file: other/project:refs/heads/main:/proto/OWNERS
    include /common/OWNERS
    file: ../OWNERS
"""

import logging
import re

from codeowners.declaration import (
    DeclarationKey,
    ImportMode,
    ImportReference,
    OwnerSet,
    OwnershipDeclaration,
)
from codeowners.errors import DeclarationParseError

logger = logging.getLogger(__name__)

FILE_NAME = "OWNERS"

_COMMA = r"[\s]*,[\s]*"
_COLON = r"[\s]*:[\s]*"
_BOL = r"^[\s]*"
_EOL = r"[\s]*(#.*)?$"
_GLOB = r"[^\s,=]+"
_EMAIL_OR_STAR = r"([^\s<>@,]+@[^\s<>@#,]+|\*)"
_EMAIL_LIST = "(" + _EMAIL_OR_STAR + "(" + _COMMA + _EMAIL_OR_STAR + ")*)"
_PROJECT_NAME = r"([^\s:]+" + _COLON + ")?"
_BRANCH_NAME = r"([^\s:]+" + _COLON + ")?"
_FILE_PATH = r"([^\s:#]+)"
_PROJECT_BRANCH_AND_FILE = _PROJECT_NAME + _BRANCH_NAME + _FILE_PATH
_SET_NOPARENT = r"set[\s]+noparent"
_FILE_DIRECTIVE = r"file:[\s]*" + _PROJECT_BRANCH_AND_FILE
_INCLUDE_DIRECTIVE = r"include[\s]+" + _PROJECT_BRANCH_AND_FILE

_PAT_COMMENT = re.compile(_BOL + _EOL)
_PAT_EMAIL = re.compile(_BOL + _EMAIL_OR_STAR + _EOL)
_PAT_ANNOTATION = re.compile(r"#\{([A-Za-z_]+)\}")
_PAT_INCLUDE = re.compile(_BOL + r"(file:[\s]*|include[\s]+)" + _PROJECT_BRANCH_AND_FILE + _EOL)
_PAT_NO_PARENT = re.compile(_BOL + _SET_NOPARENT + _EOL)
_PAT_PER_FILE_OWNERS = re.compile(
    "^(" + _EMAIL_LIST + "|" + _SET_NOPARENT + "|" + _FILE_DIRECTIVE + ")$"
)
_PAT_PER_FILE_INCLUDE = re.compile("^(" + _INCLUDE_DIRECTIVE + ")$")
_PAT_GLOBS = re.compile("^(" + _GLOB + "(" + _COMMA + _GLOB + ")*)$")
_PAT_PER_FILE = re.compile(_BOL + r"per-file[\s]+([^=#]+)=[\s]*([^#]+)" + _EOL)

_LINE_BREAK = re.compile(r"\r\n|[\n\x0b\x0c\r\x85\u2028\u2029]")


def split_globs(comma_separated_globs: str) -> list[str]:
    """Split globs on commas that are not inside ``{...}`` or ``[...]``."""
    globs = []
    current = []
    curly = 0
    square = 0
    for char in comma_separated_globs:
        if char == "," and curly == 0 and square == 0:
            globs.append("".join(current).strip())
            current = []
            continue
        current.append(char)
        if char == "{":
            curly += 1
        elif char == "}" and curly > 0:
            curly -= 1
        elif char == "[":
            square += 1
        elif char == "]" and square > 0:
            square -= 1
    if current:
        globs.append("".join(current).strip())
    return globs


def _remove_extra_spaces(text: str) -> str:
    text = re.sub(r"[\s]+", " ", text.strip())
    return re.sub(r"[\s]*:[\s]*", ":", text)


def _parse_import(line: str) -> ImportReference | None:
    m = _PAT_INCLUDE.fullmatch(line)
    if not m:
        return None
    mode = ImportMode.ALL if m.group(1).strip() == "include" else ImportMode.PER_FILE_GLOBAL_SETS_ONLY
    project = branch = None
    if m.group(2):
        project = re.split(_COLON, m.group(2))[0].strip()
        if m.group(3):
            branch = re.split(_COLON, m.group(3))[0].strip()
    return ImportReference(mode, m.group(4).strip(), project, branch)


class _Parser:
    def __init__(self) -> None:
        self.errors: list[str] = []
        self.ignore_parent_owners = False
        self.global_owners: list[str] = []
        self.global_annotations: list[tuple[str, str]] = []
        self.per_file_sets: list[OwnerSet] = []
        self.imports: list[ImportReference] = []

    def parse_line(self, line: str) -> None:
        if _PAT_NO_PARENT.fullmatch(line):
            self.ignore_parent_owners = True
            return
        if _PAT_COMMENT.fullmatch(line):
            return
        m = _PAT_EMAIL.fullmatch(line)
        if m:
            email = m.group(1).strip()
            if email not in self.global_owners:
                self.global_owners.append(email)
            if m.group(2):
                for annotation in _PAT_ANNOTATION.findall(m.group(2)):
                    if (email, annotation) not in self.global_annotations:
                        self.global_annotations.append((email, annotation))
            return
        if self._parse_per_file(line):
            return
        reference = _parse_import(line)
        if reference is not None:
            self.imports.append(reference)
            return
        self.errors.append(f"invalid line: {line}")

    def _parse_per_file(self, line: str) -> bool:
        m = _PAT_PER_FILE.fullmatch(line)
        if not m or not _PAT_GLOBS.fullmatch(m.group(1).strip()):
            return False
        directive = m.group(2).strip()
        if not _PAT_PER_FILE_OWNERS.fullmatch(directive):
            if _PAT_PER_FILE_INCLUDE.fullmatch(directive):
                self.errors.append(
                    f"import mode {ImportMode.ALL.value} is unsupported for per-file import: {line}"
                )
                return True
            return False

        globs = tuple(dict.fromkeys(split_globs(_remove_extra_spaces(m.group(1)))))
        directive = _remove_extra_spaces(directive)
        if re.fullmatch(_SET_NOPARENT, directive):
            owner_set = OwnerSet(path_expressions=globs, ignore_global_and_parent_owners=True)
        else:
            reference = _parse_import(directive)
            if reference is not None:
                owner_set = OwnerSet(path_expressions=globs, imports=(reference,))
            else:
                owners = tuple(dict.fromkeys(e.strip() for e in re.split(_COMMA, directive)))
                owner_set = OwnerSet(path_expressions=globs, owners=owners)
        self.per_file_sets.append(owner_set)
        return True


def parse(
    content: bytes | str, key: DeclarationKey, revision: str | None = None
) -> OwnershipDeclaration:
    """Parse ``OWNERS`` content; raises DeclarationParseError listing every invalid line."""
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DeclarationParseError([f"invalid encoding: {e}"]) from e

    parser = _Parser()
    for line in _LINE_BREAK.split(content):
        parser.parse_line(line)
    if parser.errors:
        raise DeclarationParseError(parser.errors)

    owner_sets = []
    if parser.global_owners:
        owner_sets.append(
            OwnerSet(
                owners=tuple(parser.global_owners),
                annotations=tuple(parser.global_annotations),
            )
        )
    owner_sets.extend(parser.per_file_sets)
    declaration = OwnershipDeclaration(
        key=key,
        revision=revision,
        ignore_parent_owners=parser.ignore_parent_owners,
        owner_sets=tuple(owner_sets),
        imports=tuple(parser.imports),
    )
    logger.debug(
        "Parsed %s: %d owner sets, %d imports", key, len(owner_sets), len(parser.imports)
    )
    return declaration


def format_import(reference: ImportReference) -> str:
    keyword = "include " if reference.mode is ImportMode.ALL else "file: "
    if reference.branch and not reference.project:
        raise ValueError(f"project is required if branch is specified: {reference}")
    return keyword + str(reference)


def format_declaration(declaration: OwnershipDeclaration) -> str:
    """Render a declaration back to ``OWNERS`` text.

    Emails and globs are sorted; the ``ignore_global_owners`` flag has no
    representation in this grammar and is dropped.
    """
    lines = []
    if declaration.ignore_parent_owners:
        lines.append("set noparent")
    lines.extend(format_import(reference) for reference in declaration.imports)

    global_sets = declaration.global_owner_sets
    annotations: dict[str, set[str]] = {}
    for owner_set in global_sets:
        for email, annotation in owner_set.annotations:
            annotations.setdefault(email, set()).add(annotation)
    for email in sorted({e for s in global_sets for e in s.owners}):
        lines.append(email + "".join(f" #{{{a}}}" for a in sorted(annotations.get(email, ()))))

    for owner_set in declaration.per_file_owner_sets:
        globs = ",".join(sorted(set(owner_set.path_expressions)))
        if owner_set.ignore_global_and_parent_owners:
            lines.append(f"per-file {globs}=set noparent")
        for reference in owner_set.imports:
            lines.append(f"per-file {globs}={format_import(reference)}")
        if owner_set.owners:
            lines.append(f"per-file {globs}={','.join(sorted(set(owner_set.owners)))}")
    return "".join(line + "\n" for line in lines)


def replace_email(content: str, old_email: str, new_email: str) -> str:
    """Replace every occurrence of an email in ``OWNERS`` content, keeping the layout."""
    if old_email == new_email:
        return content
    delimiters = r"[\s=,#]"
    pattern = re.compile(
        "(^|.*" + delimiters + "+)(" + re.escape(old_email) + ")($|" + delimiters + "+.*)"
    )
    updated = []
    for line in _LINE_BREAK.split(content):
        while pattern.fullmatch(line):
            line = pattern.sub(lambda m: m.group(1) + new_email + m.group(3), line, count=1)
        updated.append(line)
    return "\n".join(updated)


class FindOwnersBackend:
    """Backend for the ``OWNERS`` grammar."""

    name = "find-owners"
    file_name = FILE_NAME

    def parse(
        self, content: bytes | str, key: DeclarationKey, revision: str | None = None
    ) -> OwnershipDeclaration:
        return parse(content, key, revision)

    def format_declaration(self, declaration: OwnershipDeclaration) -> str:
        return format_declaration(declaration)
