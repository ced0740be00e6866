"""Annotation keys that the engine interprets."""

NEVER_SUGGEST = "NEVER_SUGGEST"
LAST_RESORT_SUGGESTION = "LAST_RESORT_SUGGESTION"

SUPPORTED_ANNOTATIONS: frozenset[str] = frozenset({NEVER_SUGGEST, LAST_RESORT_SUGGESTION})


def is_supported(annotation: str) -> bool:
    """Return True if the annotation key has a meaning for the engine."""
    return annotation in SUPPORTED_ANNOTATIONS
