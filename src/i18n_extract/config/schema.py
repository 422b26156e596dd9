"""Extraction options schema using Pydantic models."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def is_plain_filename(name: str) -> bool:
    """Whether ``name`` can be used as an asset filename inside a language directory."""
    return bool(name) and "/" not in name and "\\" not in name and name not in (".", "..")


class ExtractOptions(BaseModel):
    """Resolved options for a single extraction run."""

    model_config = ConfigDict(frozen=True)  # pyright: ignore[reportUnannotatedClassAttribute]

    base_path: Path = Field(
        default=Path("."),
        description="Project root; every other path is relative to it",
    )
    source_files_paths: list[str] = Field(
        default_factory=lambda: ["src"],
        description="Source roots to scan, relative to base_path",
    )
    excluded_paths: list[str] = Field(
        default_factory=list,
        description="Directories or files to skip, relative to base_path",
    )
    supported_langs: list[str] = Field(
        ...,
        description="Language tags to generate translation assets for (e.g., en-US, it-IT)",
        min_length=1,
    )
    assets_path: str = Field(
        default="i18n",
        description="Directory holding one sub-directory of assets per language",
    )
    format: Literal["json"] = Field(
        default="json",
        description="Asset file format",
    )
    filename: str = Field(
        default="app",
        description="Base filename for keys that are not split into their own file",
        min_length=1,
    )
    key_separator: str = Field(
        default=".",
        description="Separator between the segments of a key path",
        min_length=1,
    )
    key_value_separator: str = Field(
        default="@@",
        description="Separator between a key and its inline default value",
        min_length=1,
    )
    source_file_extensions: list[str] = Field(
        default_factory=lambda: [".js", ".jsx", ".ts", ".tsx"],
        description="Extensions of the source files to scan",
    )
    translate_function: str = Field(
        default="$translate",
        description="Exported name of the translate function",
        min_length=1,
    )
    plural_function: str = Field(
        default="$plural",
        description="Exported name of the plural function",
        min_length=1,
    )

    @field_validator("supported_langs")
    @classmethod
    def validate_supported_langs(cls, v: list[str]) -> list[str]:
        """Strip and de-duplicate language tags, keeping their order."""
        langs = [lang.strip() for lang in v]
        if any(not lang for lang in langs):
            raise ValueError("Language tags must not be empty")
        return list(dict.fromkeys(langs))

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        """Reject filenames that would escape the language directory."""
        if not is_plain_filename(v):
            raise ValueError("Filename must be a plain name without path separators")
        return v

    @field_validator("source_file_extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        """Normalize extensions to a leading dot."""
        return [ext if ext.startswith(".") else f".{ext}" for ext in v]

    @property
    def assets_dir(self) -> Path:
        """Directory containing the per-language asset directories."""
        return self.base_path / self.assets_path

    def language_dir(self, lang: str) -> Path:
        """Asset directory of a single language."""
        return self.assets_dir / lang
