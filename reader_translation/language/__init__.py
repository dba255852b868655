"""Script classification and source language resolution."""

from .resolver import LanguageResolver
from .script_classifier import classify, contains_latin, is_cjk_char

__all__ = [
    "LanguageResolver",
    "classify",
    "contains_latin",
    "is_cjk_char",
]
