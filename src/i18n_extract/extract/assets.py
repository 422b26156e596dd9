"""
Reading and writing of translation assets.

Assets live under ``<base>/<assets_path>/<lang>/`` as one or more files. On
write, a language tree is partitioned into files by its top-level keys; on
read, every file of a language is parsed and merged back into one tree.
"""

from __future__ import annotations

import asyncio
import json
import logging
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import NamedTuple

from ..config.schema import ExtractOptions, is_plain_filename
from ..utils.core.exceptions import AssetParseError, AssetWriteError, ConfigurationError
from .formatting import min_depth
from .merge import Translation, TranslationValue, deep_merge

logger = logging.getLogger(__name__)


class AssetFile(NamedTuple):
    """Serialized content destined for one asset file."""

    path: Path
    content: str


def _parse_json(target: Translation, raw: str) -> Translation:
    try:
        data: object = json.loads(raw)
    except json.JSONDecodeError as e:
        raise AssetParseError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise AssetParseError(f"Expected a JSON object, got {type(data).__name__}")
    return deep_merge(target, data)  # pyright: ignore[reportUnknownArgumentType]


def _to_json_string(translation: Translation) -> str:
    return json.dumps(translation, indent=2, ensure_ascii=False) + "\n"


PARSERS: dict[str, Callable[[Translation, str], Translation]] = {
    "json": _parse_json,
}

SERIALIZERS: dict[str, Callable[[Translation], str]] = {
    "json": _to_json_string,
}


def parse_asset(fmt: str, target: Translation, raw: str) -> Translation:
    """
    Parse serialized asset content and merge it into ``target``.

    Args:
        fmt: Asset format (e.g. ``json``)
        target: Tree receiving the parsed data
        raw: Serialized content

    Returns:
        ``target``

    Raises:
        ConfigurationError: If the format is not supported
        AssetParseError: If the content cannot be decoded
    """
    parser = PARSERS.get(fmt)
    if parser is None:
        raise ConfigurationError(f"Unsupported asset format: {fmt}")
    return parser(target, raw)


def serialize_asset(fmt: str, translation: Translation) -> str:
    """
    Serialize a tree, keeping its key order.

    Raises:
        ConfigurationError: If the format is not supported
    """
    serializer = SERIALIZERS.get(fmt)
    if serializer is None:
        raise ConfigurationError(f"Unsupported asset format: {fmt}")
    return serializer(translation)


def _own_file(key: str, value: TranslationValue, filename: str) -> bool:
    return key != filename and min_depth(value) > 0 and is_plain_filename(key)


def partition_translation(translation: Translation, filename: str) -> dict[str, Translation]:
    """
    Split a language tree into per-file trees.

    Keys holding direct leaves, keys that are not plain filenames, and the key
    named like the base filename go to the base file; every other top-level key
    gets a file of its own.

    Args:
        translation: Sorted tree of one language
        filename: Base filename (without extension)

    Returns:
        Mapping of filenames (without extension) to their trees
    """
    partitions: dict[str, Translation] = {}

    bottom: Translation = {
        key: value
        for key, value in translation.items()
        if not _own_file(key, value, filename)
    }
    if bottom:
        partitions[filename] = bottom

    for key, value in translation.items():
        if _own_file(key, value, filename):
            partitions[key] = {key: value}

    return partitions


def read_language_assets(options: ExtractOptions, lang: str) -> Translation:
    """
    Read and merge every asset file of one language.

    A missing language directory means there are no assets yet.

    Raises:
        AssetParseError: If a file cannot be decoded
        OSError: If a file cannot be read
    """
    lang_dir = options.language_dir(lang)
    data: Translation = {}

    if not lang_dir.is_dir():
        logger.debug(f"No existing assets for {lang}: {lang_dir}")
        return data

    for asset_file in sorted(lang_dir.glob(f"*.{options.format}")):
        raw = asset_file.read_text(encoding="utf-8")
        if not raw.strip():
            continue
        try:
            _ = parse_asset(options.format, data, raw)
        except AssetParseError as e:
            raise AssetParseError(
                f"Failed to parse {asset_file}: {e}",
                user_message=f"Cannot parse translation asset {asset_file}",
                context=asset_file,
            ) from e
        logger.debug(f"Read asset {asset_file}")

    return data


async def read_assets(options: ExtractOptions) -> dict[str, Translation]:
    """Read the assets of every supported language concurrently."""
    results = await asyncio.gather(
        *(asyncio.to_thread(read_language_assets, options, lang) for lang in options.supported_langs)
    )
    return dict(zip(options.supported_langs, results, strict=True))


def render_assets(options: ExtractOptions, lang: str, translation: Translation) -> list[AssetFile]:
    """Partition and serialize a language tree without touching the disk."""
    lang_dir = options.language_dir(lang)
    return [
        AssetFile(
            path=lang_dir / f"{name}.{options.format}",
            content=serialize_asset(options.format, partition),
        )
        for name, partition in partition_translation(translation, options.filename).items()
    ]


def write_asset(asset: AssetFile) -> None:
    """
    Write an asset atomically through a temporary file.

    Raises:
        AssetWriteError: If the file cannot be written
    """
    temp_path: Path | None = None
    try:
        asset.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="\n",
            dir=asset.path.parent,
            prefix=f".{asset.path.name}.",
            suffix=".tmp",
            delete=False,
        ) as temp_file:
            temp_path = Path(temp_file.name)
            _ = temp_file.write(asset.content)

        _ = temp_path.replace(asset.path)
    except OSError as e:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise AssetWriteError(
            f"Failed to write {asset.path}: {e}",
            user_message=f"Cannot write translation asset {asset.path}",
            context=asset.path,
        ) from e
