"""Ordering and shape helpers for translation trees."""

from __future__ import annotations

from .merge import Translation, TranslationValue, is_tree


def sort_target(target: Translation) -> Translation:
    """
    Return a copy of ``target`` with keys sorted at every level.

    Lists are leaves and keep their order.
    """
    return {
        key: sort_target(value) if is_tree(value) else value  # pyright: ignore[reportArgumentType]
        for key, value in sorted(target.items(), key=lambda item: item[0])
    }


def min_depth(value: TranslationValue) -> int:
    """
    Shortest number of levels between ``value`` and one of its leaves.

    Leaves and empty trees have depth 0.
    """
    if not is_tree(value) or not value:
        return 0
    return 1 + min(min_depth(child) for child in value.values())  # pyright: ignore[reportAttributeAccessIssue]
