"""
Nested translation tree operations.

A translation tree maps keys to either a leaf value (usually a string) or a
nested tree. Every language owns its own tree: values are cloned whenever
they are inserted so no container is ever shared between two trees.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Sequence
from typing import TypeAlias, TypeVar

logger = logging.getLogger(__name__)

TranslationValue: TypeAlias = "str | int | float | bool | None | list[TranslationValue] | Translation"
Translation: TypeAlias = "dict[str, TranslationValue]"

T = TypeVar("T")


def is_tree(value: object) -> bool:
    """True for nested trees (mappings), False for leaves including lists."""
    return isinstance(value, dict)


def deep_clone(value: T) -> T:
    """Return a copy of ``value`` sharing no containers with it."""
    return copy.deepcopy(value)


def deep_set(target: Translation, keys: Sequence[str], value: TranslationValue) -> None:
    """
    Set a leaf, creating the intermediate levels as needed.

    A leaf found where an intermediate level is needed is replaced by a tree.

    Args:
        target: Tree to modify in place
        keys: Path segments, e.g. ``["app", "title"]``
        value: Leaf value; cloned before insertion
    """
    if not keys:
        return

    node = target
    for key in keys[:-1]:
        child = node.get(key)
        if not is_tree(child):
            if key in node:
                logger.warning(f"Replacing leaf {key!r} with a nested key ({'.'.join(keys)})")
            child = {}
            node[key] = child
        node = child  # pyright: ignore[reportAssignmentType]

    last = keys[-1]
    if is_tree(node.get(last)) and not is_tree(value):
        logger.warning(f"Replacing nested keys under {last!r} with a leaf ({'.'.join(keys)})")
    node[last] = deep_clone(value)


def deep_merge(target: Translation, source: Translation) -> Translation:
    """
    Merge ``source`` into ``target``.

    ``target`` is modified in place and returned; ``source`` is never modified
    and none of its containers end up in ``target``. Rules, per key:

    - both values are trees: merge them recursively;
    - ``source`` holds an empty string and ``target`` already has a value:
      keep ``target`` (an empty entry never erases a value);
    - one value is a tree and the other a leaf: keep ``source``'s side and log
      a warning;
    - otherwise ``source`` wins.

    Args:
        target: Tree receiving the values
        source: Tree providing the values

    Returns:
        ``target``
    """
    for key, value in source.items():
        if key not in target:
            target[key] = deep_clone(value)
            continue

        current = target[key]
        if is_tree(current) and is_tree(value):
            _ = deep_merge(current, value)  # pyright: ignore[reportArgumentType]
        elif value == "" and current is not None:
            continue
        else:
            if is_tree(current) != is_tree(value):
                logger.warning(f"Conflicting types for key {key!r}: the merged-in value wins")
            target[key] = deep_clone(value)

    return target
