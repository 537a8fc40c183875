"""Language-specific extractors.

Each extractor knows how to traverse a tree-sitter tree for its language
and produce a source unit.

Supported languages:
    - JavaScript (javascript.py), including JSX
"""

from .base import BaseExtractor
from .javascript import JavaScriptExtractor

# Registry of language extractors
_extractors: dict[str, type[BaseExtractor]] = {
    "javascript": JavaScriptExtractor,
}


def get_extractor(language: str, **kwargs: object) -> BaseExtractor:
    """Get an extractor instance for the given language.

    Args:
        language: Language identifier.
        **kwargs: Passed to the extractor constructor.

    Returns:
        An instance of the appropriate extractor.

    Raises:
        ValueError: If no extractor is registered for the language.
    """
    language = language.lower()
    if language not in _extractors:
        raise ValueError(f"No extractor registered for language: {language}")
    return _extractors[language](**kwargs)


def supported_languages() -> list[str]:
    """Get list of languages with registered extractors."""
    return list(_extractors.keys())


__all__ = [
    "BaseExtractor",
    "JavaScriptExtractor",
    "get_extractor",
    "supported_languages",
]
