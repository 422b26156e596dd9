"""
Integration tests for the extraction pipeline.

These tests lay out a throwaway project, run the whole pipeline against it
and inspect the assets written for every language.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from i18n_extract.config.schema import ExtractOptions
from i18n_extract.extract.pipeline import (
    build_skeleton,
    discover_source_files,
    extract,
    extract_keys,
    parse_default_value,
    run_extraction,
)
from i18n_extract.utils.core.exceptions import ConfigurationError, DiscoveryError

IMPORT = "import { $translate as t, $plural as p } from 'qwik-speak';\n"


def load(path: Path) -> object:
    return json.loads(path.read_text(encoding="utf-8"))


class TestExtract:
    """End-to-end extraction runs."""

    @pytest.mark.asyncio
    async def test_writes_partitioned_assets(
        self,
        project_dir: Path,
        write_source: Callable[[str, str], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        """Test nested keys get their own file and leaves go to the base file."""
        _ = write_source("home.tsx", IMPORT + "t(['a.b', 'a.c']);\nt('d');\n")

        result = await extract(make_options(supported_langs=["en", "fr"]))

        for lang in ("en", "fr"):
            assert load(project_dir / "i18n" / lang / "app.json") == {"d": ""}
            assert load(project_dir / "i18n" / lang / "a.json") == {"a": {"b": "", "c": ""}}
        assert result.keys == ["a.b", "a.c", "d"]
        assert result.unique_keys == 3
        assert len(result.written_files) == 4

    def test_second_run_is_idempotent(
        self,
        project_dir: Path,
        write_source: Callable[[str, str], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        _ = write_source("home.tsx", IMPORT + "t('home.title');\nt('b.x@@Hello');\n")
        options = make_options()
        _ = run_extraction(options)
        first = {path: path.read_bytes() for path in (project_dir / "i18n").rglob("*.json")}

        result = run_extraction(options)

        second = {path: path.read_bytes() for path in (project_dir / "i18n").rglob("*.json")}
        assert first == second
        assert result.changed_files == []

    def test_existing_translation_preserved(
        self,
        project_dir: Path,
        write_source: Callable[[str, str], Path],
        write_existing_asset: Callable[[str, str, object], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        """Test translated values and keys no longer used both survive."""
        _ = write_source("home.tsx", IMPORT + "t('app.title');\nt('app.subtitle');\n")
        _ = write_existing_asset("it-IT", "app", {"app": {"title": "Bonjour", "legacy": "Vecchio"}})

        _ = run_extraction(make_options())

        assert load(project_dir / "i18n" / "it-IT" / "app.json") == {
            "app": {"legacy": "Vecchio", "subtitle": "", "title": "Bonjour"}
        }
        assert load(project_dir / "i18n" / "en-US" / "app.json") == {
            "app": {"subtitle": "", "title": ""}
        }

    def test_base_file_holds_base_key_and_leaves(
        self,
        project_dir: Path,
        write_source: Callable[[str, str], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        _ = write_source("app.ts", IMPORT + "t('app.title');\nt('standalone');\n")

        _ = run_extraction(make_options(supported_langs=["en-US"]))

        lang_dir = project_dir / "i18n" / "en-US"
        assert sorted(path.name for path in lang_dir.iterdir()) == ["app.json"]
        assert load(lang_dir / "app.json") == {"app": {"title": ""}, "standalone": ""}

    def test_path_like_key_survives_second_run(
        self,
        project_dir: Path,
        write_source: Callable[[str, str], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        """Test a top-level key with a slash is written where it is read back."""
        _ = write_source("home.tsx", IMPORT + "t('pages/home.title');\nt('a\\\\b.c');\n")
        options = make_options(supported_langs=["en-US"])
        lang_dir = project_dir / "i18n" / "en-US"

        _ = run_extraction(options)

        assert sorted(path.name for path in lang_dir.rglob("*")) == ["app.json"]

        _ = (lang_dir / "app.json").write_text(
            json.dumps({"a\\b": {"c": "C"}, "pages/home": {"title": "Home"}}), encoding="utf-8"
        )
        _ = run_extraction(options)

        assert load(lang_dir / "app.json") == {"a\\b": {"c": "C"}, "pages/home": {"title": "Home"}}

    def test_dynamic_key_counted_once(
        self,
        write_source: Callable[[str, str], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        _ = write_source("home.tsx", IMPORT + "t(key);\nt('static');\n")

        result = run_extraction(make_options(), write=False)

        assert result.dynamic == 1
        assert result.keys == ["static"]

    def test_plural_keys(
        self,
        project_dir: Path,
        write_source: Callable[[str, str], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        _ = write_source("cart.tsx", IMPORT + "p(count, 'cart.item');\np(n, key);\n")

        result = run_extraction(make_options(supported_langs=["en-US", "ja"]))

        assert result.keys == ["cart.item.one", "cart.item.other"]
        assert result.dynamic_plural == 1
        assert load(project_dir / "i18n" / "ja" / "cart.json") == {
            "cart": {"item": {"one": "", "other": ""}}
        }

    def test_default_values(
        self,
        project_dir: Path,
        write_source: Callable[[str, str], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        _ = write_source(
            "home.tsx",
            IMPORT + "t('home.title@@Welcome');\nt('home.list@@[\"a\",\"b\"]');\n",
        )

        _ = run_extraction(make_options(supported_langs=["en-US"]))

        assert load(project_dir / "i18n" / "en-US" / "home.json") == {
            "home": {"list": ["a", "b"], "title": "Welcome"}
        }

    def test_check_mode_writes_nothing(
        self,
        project_dir: Path,
        write_source: Callable[[str, str], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        _ = write_source("home.tsx", IMPORT + "t('d');\n")

        result = run_extraction(make_options(supported_langs=["en-US"]), write=False)

        assert result.changed_files == [project_dir / "i18n" / "en-US" / "app.json"]
        assert result.written_files == []
        assert not (project_dir / "i18n").exists()

    def test_unknown_language_fails_before_io(
        self,
        project_dir: Path,
        write_source: Callable[[str, str], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        _ = write_source("home.tsx", IMPORT + "t('d');\n")

        with pytest.raises(ConfigurationError):
            _ = run_extraction(make_options(supported_langs=["en-US", "xx"]))

        assert not (project_dir / "i18n").exists()

    def test_missing_source_root(self, make_options: Callable[..., ExtractOptions]) -> None:
        with pytest.raises(DiscoveryError):
            _ = run_extraction(make_options(source_files_paths=["missing"]))

    def test_no_source_files(
        self, project_dir: Path, make_options: Callable[..., ExtractOptions]
    ) -> None:
        """Test an empty project writes no assets."""
        result = run_extraction(make_options())
        assert result.keys == []
        assert result.written_files == []


class TestDiscoverSourceFiles:
    """Test source file discovery."""

    def test_depth_first_sorted(
        self,
        project_dir: Path,
        write_source: Callable[[str, str], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        _ = write_source("b.ts", "")
        _ = write_source("a/z.tsx", "")
        _ = write_source("a/y.js", "")

        files = discover_source_files(make_options())

        src = project_dir / "src"
        assert files == [src / "a" / "y.js", src / "a" / "z.tsx", src / "b.ts"]

    def test_skips_tests_and_other_extensions(
        self,
        write_source: Callable[[str, str], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        _ = write_source("home.spec.ts", "")
        _ = write_source("home.test.tsx", "")
        _ = write_source("data.json", "")
        kept = write_source("home.tsx", "")

        assert discover_source_files(make_options()) == [kept]

    def test_excluded_paths(
        self,
        write_source: Callable[[str, str], Path],
        make_options: Callable[..., ExtractOptions],
    ) -> None:
        _ = write_source("legacy/old.ts", "")
        _ = write_source("vendor.ts", "")
        kept = write_source("home.ts", "")

        options = make_options(excluded_paths=["src/legacy", "./src/vendor.ts"])

        assert discover_source_files(options) == [kept]


class TestExtractKeys:
    """Test key collection from a single source text."""

    def test_translate_before_plural(self, make_options: Callable[..., ExtractOptions]) -> None:
        code = IMPORT + "p(1, 'count');\nt('title');\n"
        keys, _ = extract_keys(code, make_options(supported_langs=["en"]))
        assert keys == ["title", "count.one", "count.other"]

    def test_unparsed_calls_counted(self, make_options: Callable[..., ExtractOptions]) -> None:
        keys, stats = extract_keys(IMPORT + "t('title');\nt('broken\n", make_options())
        assert keys == ["title"]
        assert stats["unparsed"] == 1

    def test_prose_is_not_counted(self, make_options: Callable[..., ExtractOptions]) -> None:
        code = IMPORT + "<p>Don't (see below)</p>;\nt('a');\n"
        keys, stats = extract_keys(code, make_options())
        assert keys == ["a"]
        assert stats["dynamic"] == 0

    def test_no_calls(self, make_options: Callable[..., ExtractOptions]) -> None:
        keys, stats = extract_keys("const x = 1;\n", make_options())
        assert keys == []
        assert sum(stats.values()) == 0


class TestBuildSkeleton:
    """Test skeleton construction from keys."""

    def test_every_language_gets_every_key(self, make_options: Callable[..., ExtractOptions]) -> None:
        skeleton = build_skeleton(["a.b", "c@@Hi"], make_options())
        expected = {"a": {"b": ""}, "c": "Hi"}
        assert skeleton == {"en-US": expected, "it-IT": expected}

    def test_custom_separators(self, make_options: Callable[..., ExtractOptions]) -> None:
        options = make_options(supported_langs=["en"], key_separator=":", key_value_separator="|")
        assert build_skeleton(["a:b|Hi"], options) == {"en": {"a": {"b": "Hi"}}}


class TestParseDefaultValue:
    """Test decoding of inline default values."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Hello", "Hello"),
            ('["a", "b"]', ["a", "b"]),
            ('{"one": "1"}', {"one": "1"}),
            ("{{name}}", "{{name}}"),
            ("[not json]", "[not json]"),
        ],
    )
    def test_values(self, raw: str, expected: object) -> None:
        assert parse_default_value(raw) == expected
