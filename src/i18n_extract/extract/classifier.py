"""
Classification of scanned call sites into translation keys.

A call either yields static keys or is counted as dynamic, when its key or
parameters are only known at runtime.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from .plural_rules import CATEGORY_ORDER, get_options, get_rules
from .scanner import (
    Argument,
    ArrayExpression,
    CallExpression,
    Identifier,
    Literal,
    ObjectExpression,
)

PLACEHOLDER_RE = re.compile(r"\$\{.*\}", re.DOTALL)


@dataclass
class Classification:
    """Keys produced by one call site, or the fact that it was dynamic."""

    keys: list[str] = field(default_factory=list)
    dynamic: bool = False


def is_dynamic(argument: Argument | None) -> bool:
    """True for arguments whose value is computed at runtime."""
    match argument:
        case Identifier() | CallExpression():
            return True
        case _:
            return False


def _argument(arguments: Sequence[Argument], index: int) -> Argument | None:
    return arguments[index] if index < len(arguments) else None


def classify_translate(call: CallExpression) -> Classification:
    """
    Classify a translate call: ``t(key | keys[], params?)``.

    Args:
        call: Scanned call site

    Returns:
        The static keys, or a dynamic classification
    """
    args = call.arguments
    match _argument(args, 0):
        case ArrayExpression(elements=elements):
            keys = [
                element.value
                for element in elements
                if isinstance(element, Literal) and isinstance(element.value, str) and element.value
            ]
            return Classification(keys=keys)
        case Identifier() | CallExpression():
            return Classification(dynamic=True)
        case Literal(value=str() as key) if key:
            if PLACEHOLDER_RE.search(key) or is_dynamic(_argument(args, 1)):
                return Classification(dynamic=True)
            return Classification(keys=[key])
        case _:
            return Classification()


def classify_plural(
    call: CallExpression,
    supported_langs: Sequence[str],
    key_separator: str = ".",
) -> Classification:
    """
    Classify a plural call: ``p(count, key?, params?, options?)``.

    One key is produced per plural category reachable in any of the supported
    languages, since each language has its own rule set.

    Args:
        call: Scanned call site
        supported_langs: Every language the run generates assets for
        key_separator: Separator between the key and the category

    Returns:
        The static keys, or a dynamic classification

    Raises:
        ConfigurationError: If a language is unknown
    """
    args = call.arguments
    if any(is_dynamic(_argument(args, index)) for index in (1, 2, 3)):
        return Classification(dynamic=True)

    match _argument(args, 3):
        case ObjectExpression(properties=properties):
            options = get_options(properties)
        case _:
            options = get_options(None)

    reachable = {rule for lang in supported_langs for rule in get_rules(lang, options)}
    rules = [rule for rule in CATEGORY_ORDER if rule in reachable]

    match _argument(args, 1):
        case Literal(value=str() as key) if key:
            prefix: str | None = key
        case _:
            prefix = None

    keys = [f"{prefix}{key_separator}{rule}" if prefix else rule for rule in rules]
    return Classification(keys=keys)
