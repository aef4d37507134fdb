"""
Module 'selection': résolution du paramètre services en codes catalogue.
"""

from .parser import SelectionParser, split_tokens, DEFAULT_MAX_LENGTH, DEFAULT_MAX_SERVICES
from .rules import ExactCodeRule, PrefixRule, build_rules

__all__ = [
    "SelectionParser",
    "split_tokens",
    "DEFAULT_MAX_LENGTH",
    "DEFAULT_MAX_SERVICES",
    "ExactCodeRule",
    "PrefixRule",
    "build_rules",
]
