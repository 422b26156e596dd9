"""
Extraction pipeline.

This module ties the scanner, classifier, tree operations and asset handling
together: it discovers the source files, collects the keys they use, merges
them with the existing assets and writes the result for every language.

Usage Examples:
    Run an extraction:
        >>> from i18n_extract.config.schema import ExtractOptions
        >>> result = run_extraction(ExtractOptions(supported_langs=["en-US", "it-IT"]))
        >>> print(result)
        Extraction Results: 12 unique keys, 1 dynamic, 0 dynamic plural, 2 file(s) written
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import override

from ..config.schema import ExtractOptions
from ..utils.core.exceptions import DiscoveryError
from .assets import AssetFile, read_assets, render_assets, write_asset
from .classifier import classify_plural, classify_translate
from .formatting import sort_target
from .merge import Translation, TranslationValue, deep_merge, deep_set
from .plural_rules import validate_languages
from .scanner import CallScanner

logger = logging.getLogger(__name__)

# Stats categories
UNIQUE_KEYS = "unique keys"
DYNAMIC = "dynamic"
DYNAMIC_PLURAL = "dynamic plural"
UNPARSED = "unparsed"

TEST_FILE_RE = re.compile(r"test|spec")
COMPOSITE_DEFAULT_RE = re.compile(r"^[\[{].*[\]}]$", re.DOTALL)


@dataclass
class ExtractionResult:
    """Result of an extraction run."""

    keys: list[str] = field(default_factory=list)
    stats: Counter[str] = field(default_factory=Counter)
    translations: dict[str, Translation] = field(default_factory=dict)
    written_files: list[Path] = field(default_factory=list)
    changed_files: list[Path] = field(default_factory=list)

    @property
    def unique_keys(self) -> int:
        """Number of distinct keys found in the sources."""
        return self.stats[UNIQUE_KEYS]

    @property
    def dynamic(self) -> int:
        """Translate calls skipped because of dynamic keys or params."""
        return self.stats[DYNAMIC]

    @property
    def dynamic_plural(self) -> int:
        """Plural calls skipped because of dynamic arguments."""
        return self.stats[DYNAMIC_PLURAL]

    @property
    def unparsed(self) -> int:
        """Call sites the scanner could not parse."""
        return self.stats[UNPARSED]

    @override
    def __str__(self) -> str:
        return (
            f"Extraction Results: "
            f"{self.unique_keys} unique keys, "
            f"{self.dynamic} dynamic, "
            f"{self.dynamic_plural} dynamic plural, "
            f"{len(self.written_files)} file(s) written"
        )


def _normalize(path: Path) -> Path:
    return Path(os.path.normpath(path))


def is_source_file(path: Path, extensions: list[str]) -> bool:
    """Source files have a scanned extension and are not tests or specs."""
    return path.suffix in extensions and not TEST_FILE_RE.search(path.name)


def discover_source_files(options: ExtractOptions) -> list[Path]:
    """
    Walk the source roots depth-first and collect the files to scan.

    Raises:
        DiscoveryError: If a source root or directory cannot be read
    """
    excluded = {_normalize(options.base_path / path) for path in options.excluded_paths}
    source_files: list[Path] = []

    def walk(directory: Path) -> None:
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise DiscoveryError(
                f"Cannot read directory {directory}: {e}",
                user_message=f"Cannot read source directory {directory}",
                context=directory,
            ) from e

        for entry in entries:
            if _normalize(entry) in excluded:
                logger.debug(f"Excluded: {entry}")
                continue
            if entry.is_dir():
                walk(entry)
            elif is_source_file(entry, options.source_file_extensions):
                source_files.append(entry)

    for source_path in options.source_files_paths:
        root = _normalize(options.base_path / source_path)
        if root in excluded:
            continue
        if not root.is_dir():
            raise DiscoveryError(
                f"Source path is not a directory: {root}",
                user_message=f"Source directory does not exist: {root}",
                context=root,
            )
        walk(root)

    logger.debug(f"Found {len(source_files)} source file(s)")
    return source_files


def extract_keys(code: str, options: ExtractOptions) -> tuple[list[str], Counter[str]]:
    """
    Collect the keys used by one source text.

    Returns:
        Keys in source order (translate calls first, then plural calls) and
        the diagnostics counted while scanning
    """
    keys: list[str] = []
    stats: Counter[str] = Counter()

    translate_scanner = CallScanner(code, options.translate_function)
    for call in translate_scanner.scan():
        classification = classify_translate(call)
        if classification.dynamic:
            stats[DYNAMIC] += 1
            logger.debug(f"Dynamic translate call at line {call.line}")
            continue
        keys.extend(classification.keys)
    stats[UNPARSED] += translate_scanner.skipped

    plural_scanner = CallScanner(code, options.plural_function)
    for call in plural_scanner.scan():
        classification = classify_plural(call, options.supported_langs, options.key_separator)
        if classification.dynamic:
            stats[DYNAMIC_PLURAL] += 1
            logger.debug(f"Dynamic plural call at line {call.line}")
            continue
        keys.extend(classification.keys)
    stats[UNPARSED] += plural_scanner.skipped

    return keys, stats


def parse_source_file(path: Path, options: ExtractOptions) -> tuple[list[str], Counter[str]]:
    """
    Read one source file and collect its keys.

    Raises:
        DiscoveryError: If the file cannot be read
    """
    try:
        code = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise DiscoveryError(f"Cannot read source file {path}: {e}", context=path) from e
    return extract_keys(code, options)


def parse_default_value(raw: str) -> TranslationValue:
    """
    Decode an inline default value.

    Values that look like a JSON array or object are decoded; ``{{...}}``
    placeholders and anything that fails to decode stay strings.
    """
    if COMPOSITE_DEFAULT_RE.match(raw) and not raw.startswith("{{"):
        try:
            return json.loads(raw)  # pyright: ignore[reportAny]
        except json.JSONDecodeError:
            logger.warning(f"Default value is not valid JSON, keeping it as text: {raw}")
    return raw


def build_skeleton(keys: list[str], options: ExtractOptions) -> dict[str, Translation]:
    """
    Build one tree per language from the extracted keys.

    Every leaf is an empty string unless the key carries a default value after
    ``key_value_separator``.
    """
    translations: dict[str, Translation] = {lang: {} for lang in options.supported_langs}

    for raw_key in keys:
        key, _, default = raw_key.partition(options.key_value_separator)
        value = parse_default_value(default) if default else ""
        path = key.split(options.key_separator)
        for lang in options.supported_langs:
            deep_set(translations[lang], path, value)

    return translations


async def extract(options: ExtractOptions, write: bool = True) -> ExtractionResult:
    """
    Run the extraction pipeline.

    Args:
        options: Resolved extraction options
        write: Write the assets; when False only ``changed_files`` is computed

    Returns:
        ExtractionResult with keys, diagnostics and files

    Raises:
        ConfigurationError: If a language is unknown (before any I/O)
        DiscoveryError: If a source directory or file cannot be read
        AssetParseError: If an existing asset cannot be decoded
        AssetWriteError: If an asset cannot be written
    """
    validate_languages(options.supported_langs)

    result = ExtractionResult()

    source_files = discover_source_files(options)
    parsed = await asyncio.gather(
        *(asyncio.to_thread(parse_source_file, path, options) for path in source_files)
    )

    keys: list[str] = []
    for file_keys, file_stats in parsed:
        keys.extend(file_keys)
        result.stats.update(file_stats)

    result.keys = list(dict.fromkeys(keys))
    result.stats[UNIQUE_KEYS] = len(result.keys)

    translations = build_skeleton(result.keys, options)
    existing = await read_assets(options)
    for lang in options.supported_langs:
        translations[lang] = sort_target(deep_merge(translations[lang], existing[lang]))
    result.translations = translations

    for lang in options.supported_langs:
        for asset in render_assets(options, lang, translations[lang]):
            if _has_changed(asset):
                result.changed_files.append(asset.path)
            if write:
                write_asset(asset)
                result.written_files.append(asset.path)
                logger.info(str(asset.path))

    return result


def _has_changed(asset: AssetFile) -> bool:
    if not asset.path.exists():
        return True
    return asset.path.read_text(encoding="utf-8") != asset.content


def run_extraction(options: ExtractOptions, write: bool = True) -> ExtractionResult:
    """Synchronous entry point that runs the pipeline in a new event loop."""
    return asyncio.run(extract(options, write=write))


def log_diagnostics(result: ExtractionResult) -> None:
    """Log the counters of a run."""
    logger.info(f"extracted keys: {result.unique_keys}")
    logger.info(f"skipped keys due to dynamic params: {result.dynamic}")
    logger.info(f"skipped plurals due to dynamic params: {result.dynamic_plural}")
    if result.unparsed:
        logger.info(f"unparsed call sites: {result.unparsed}")
