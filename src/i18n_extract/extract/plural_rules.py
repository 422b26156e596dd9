"""
Plural category resolution based on the Unicode CLDR plural rules.

Babel ships the CLDR rule sets; this module only selects the rule type and
works out which categories a call can actually reach.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import lru_cache

from babel import Locale, UnknownLocaleError
from babel.plural import PluralRule

from ..utils.core.exceptions import ConfigurationError
from .scanner import Literal, Property

logger = logging.getLogger(__name__)

# CLDR order of the plural categories
CATEGORY_ORDER = ("zero", "one", "two", "few", "many", "other")

# Integers probed when only whole numbers can be formatted
_INTEGER_SAMPLES = tuple(range(0, 1001)) + tuple(10**exponent for exponent in range(4, 8))

PluralOptions = dict[str, str | int | float | bool | None]


def get_options(properties: Iterable[Property] | None) -> PluralOptions:
    """
    Collect the literal options of a plural call.

    Properties whose value is not a literal are ignored.

    Args:
        properties: Properties of the options object literal, if any

    Returns:
        Mapping of option names to their literal values
    """
    options: PluralOptions = {}
    for prop in properties or ():
        match prop.value:
            case Literal(value=value):
                options[prop.key] = value
            case _:
                logger.debug(f"Ignoring non-literal plural option: {prop.key}")
    return options


def get_locale(lang: str) -> Locale:
    """
    Parse a BCP 47 language tag.

    Raises:
        ConfigurationError: If the tag is malformed or unknown to CLDR
    """
    try:
        return Locale.parse(lang, sep="-")
    except (UnknownLocaleError, ValueError, TypeError) as e:
        raise ConfigurationError(
            f"Unsupported language tag {lang!r}: {e}",
            user_message=f"Unknown language: {lang}",
            context=lang,
        ) from e


def get_rules(lang: str, options: PluralOptions | None = None) -> tuple[str, ...]:
    """
    Return the plural categories reachable for a language.

    ``options["type"] == "ordinal"`` selects ordinal rules, anything else
    cardinal rules. When ``maximumFractionDigits`` is 0 only the categories an
    integer can reach are returned.

    Args:
        lang: Language tag (e.g. ``en-US``)
        options: Literal options of the plural call

    Returns:
        Categories in CLDR order

    Raises:
        ConfigurationError: If the language is unknown
    """
    options = options or {}
    ordinal = options.get("type") == "ordinal"
    integers_only = _is_zero(options.get("maximumFractionDigits"))
    return _rules(lang, ordinal, integers_only)


@lru_cache(maxsize=256)
def _rules(lang: str, ordinal: bool, integers_only: bool) -> tuple[str, ...]:
    locale = get_locale(lang)
    rule: PluralRule = locale.ordinal_form if ordinal else locale.plural_form

    if integers_only:
        categories = {rule(n) for n in _INTEGER_SAMPLES}
    else:
        categories = set(rule.tags) | {"other"}

    return tuple(category for category in CATEGORY_ORDER if category in categories)


def _is_zero(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


def validate_languages(langs: Iterable[str]) -> None:
    """
    Fail fast on language tags CLDR does not know.

    Raises:
        ConfigurationError: For the first unknown tag
    """
    for lang in langs:
        _ = get_locale(lang)
