"""Matching of repository paths against glob path expressions.

Supported syntax:

- ``*`` matches any characters within one path segment.
- ``**`` matches across segments; ``**/`` also matches no folder at all.
- ``?`` matches one character within a segment.
- ``{a,b}`` matches one of the alternatives.
- ``[abc]``, ``[a-z]`` and ``[!abc]`` match character classes.
- ``\\`` escapes the next character.
"""

import logging
import re
from functools import lru_cache

logger = logging.getLogger(__name__)


def _split_alternatives(body: str) -> list[str]:
    alternatives = []
    current = []
    depth = 0
    for char in body:
        if char == "," and depth == 0:
            alternatives.append("".join(current))
            current = []
            continue
        if char == "[":
            depth += 1
        elif char == "]" and depth > 0:
            depth -= 1
        current.append(char)
    alternatives.append("".join(current))
    return alternatives


def _translate(glob: str, inside_group: bool = False) -> str:
    out = []
    i = 0
    n = len(glob)
    while i < n:
        char = glob[i]
        if char == "*":
            if glob.startswith("**", i):
                i += 2
                if i < n and glob[i] == "/":
                    out.append("(?:.*/)?")
                    i += 1
                else:
                    out.append(".*")
                continue
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "{":
            if inside_group:
                raise ValueError(f"nested groups are not supported: {glob}")
            end = glob.find("}", i)
            if end == -1:
                raise ValueError(f"missing '}}' in glob: {glob}")
            alternatives = _split_alternatives(glob[i + 1 : end])
            out.append("(?:" + "|".join(_translate(a, True) for a in alternatives) + ")")
            i = end
        elif char == "[":
            end = glob.find("]", i + 2)
            if end == -1:
                raise ValueError(f"missing ']' in glob: {glob}")
            body = glob[i + 1 : end]
            if "/" in body:
                raise ValueError(f"character class must not contain '/': {glob}")
            body = body.replace("\\", "\\\\")
            if body.startswith("!"):
                body = "^" + body[1:]
            elif body.startswith("^"):
                body = "\\" + body
            out.append("[" + body + "]")
            i = end
        elif char == "\\":
            i += 1
            if i == n:
                raise ValueError(f"no character to escape in glob: {glob}")
            out.append(re.escape(glob[i]))
        else:
            out.append(re.escape(char))
        i += 1
    return "".join(out)


@lru_cache(maxsize=1024)
def compile_glob(glob: str) -> re.Pattern[str]:
    """Compile a glob into a regular expression; raises ValueError if invalid."""
    try:
        return re.compile(_translate(glob))
    except re.error as e:
        raise ValueError(f"invalid glob {glob}: {e}") from e


def matches(glob: str, relative_path: str) -> bool:
    """Return True if the path (relative to the declaration folder) matches the glob.

    Invalid globs never match.
    """
    try:
        pattern = compile_glob(glob)
    except ValueError:
        logger.debug("Ignoring invalid glob %s", glob, exc_info=True)
        return False
    return pattern.fullmatch(relative_path) is not None


def matches_any(path_expressions: tuple[str, ...], relative_path: str) -> bool:
    """Return True if any of the path expressions matches the path."""
    return any(matches(glob, relative_path) for glob in path_expressions)
