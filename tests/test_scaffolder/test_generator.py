"""Unit tests for the scaffolding tasks (osjs_cli.scaffolder.generator).

Tests cover:
- Name filtering and validation
- Installed-package discovery (plain and scoped)
- scaffold_basic: decline, existing destination, header + template body
- scaffold_package: decline, validation before writes, complete rendering
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from osjs_cli.scaffolder.generator import (
    APPLICATION_FILES,
    SCAFFOLDS,
    BasicAnswers,
    DestinationExistsError,
    InvalidNameError,
    PackageAnswers,
    PackageInfo,
    ScaffoldError,
    discover_packages,
    filter_input,
    scaffold_basic,
    scaffold_package,
    validate_package_name,
)
from osjs_cli.scaffolder.templates import MARKER, TemplateRenderer


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


class TestFilterInput:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("MyApplication", "MyApplication"),
            ("my-app 2", "myapp2"),
            ("  spaced_name ", "spaced_name"),
            ("ÄÖü", ""),
            ("../etc", "etc"),
        ],
    )
    def test_filter(self, raw, expected):
        assert filter_input(raw) == expected


class TestValidatePackageName:
    @pytest.mark.unit
    def test_valid(self):
        assert validate_package_name("Fresh", []) == "Fresh"

    @pytest.mark.unit
    def test_empty(self):
        with pytest.raises(InvalidNameError, match="Invalid package name"):
            validate_package_name("", [])

    @pytest.mark.unit
    def test_taken(self, tmp_path):
        installed = [PackageInfo(name="Calculator", path=tmp_path)]
        with pytest.raises(InvalidNameError, match="already exists"):
            validate_package_name("Calculator", installed)

    @pytest.mark.unit
    def test_is_scaffold_error(self):
        assert issubclass(InvalidNameError, ScaffoldError)
        assert issubclass(DestinationExistsError, ScaffoldError)


class TestDiscoverPackages:
    @pytest.mark.unit
    def test_finds_plain_and_scoped(self, node_modules: Path):
        packages = discover_packages(node_modules)
        assert sorted(p.name for p in packages) == ["Calculator", "Draw", "Gallery"]
        scoped = next(p for p in packages if p.name == "Gallery")
        assert scoped.path == node_modules / "@osjs" / "gallery"
        assert scoped.meta["type"] == "application"

    @pytest.mark.unit
    def test_missing_directory(self, tmp_path: Path):
        assert discover_packages(tmp_path / "node_modules") == []

    @pytest.mark.unit
    def test_bad_metadata_skipped(self, node_modules: Path):
        broken = node_modules / "broken"
        broken.mkdir()
        (broken / "metadata.json").write_text("{not json", encoding="utf-8")
        nameless = node_modules / "nameless"
        nameless.mkdir()
        (nameless / "metadata.json").write_text("[]", encoding="utf-8")
        assert len(discover_packages(node_modules)) == 3


# ---------------------------------------------------------------------------
# scaffold_basic
# ---------------------------------------------------------------------------


class TestScaffoldBasic:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_declined_writes_nothing(self, tmp_path: Path):
        answers = BasicAnswers(filename="my-auth.js", target="src/client/auth/my-auth.js")
        assert await scaffold_basic("auth", answers, tmp_path) is None
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", sorted(SCAFFOLDS))
    @pytest.mark.parametrize("type_", ["client", "server"])
    async def test_writes_header_and_template(self, tmp_path: Path, kind: str, type_: str):
        answers = BasicAnswers(
            type=type_, filename="x.js", target=f"src/{type_}/{kind}/x.js", confirm=True
        )
        written = await scaffold_basic(kind, answers, tmp_path)

        assert written == (tmp_path / "src" / type_ / kind / "x.js").resolve()
        scaffold = SCAFFOLDS[kind]
        raw = TemplateRenderer().source(f"{scaffold.dirname}/{type_}.js")
        assert written.read_text(encoding="utf-8") == f"/*{scaffold.info}*/" + raw

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_existing_destination(self, tmp_path: Path):
        target = tmp_path / "existing.js"
        target.write_text("keep me", encoding="utf-8")
        answers = BasicAnswers(filename="existing.js", target="existing.js", confirm=True)

        with pytest.raises(DestinationExistsError) as exc_info:
            await scaffold_basic("vfs", answers, tmp_path)

        assert exc_info.value.destination == target.resolve()
        assert target.read_text(encoding="utf-8") == "keep me"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_kind(self, tmp_path: Path):
        answers = BasicAnswers(filename="a.js", target="a.js", confirm=True)
        with pytest.raises(KeyError):
            await scaffold_basic("database", answers, tmp_path)


# ---------------------------------------------------------------------------
# scaffold_package
# ---------------------------------------------------------------------------


class TestScaffoldPackage:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_renders_every_file(self, tmp_path: Path):
        answers = PackageAnswers(name="MyApp", target="src/packages/MyApp", confirm=True)
        written = await scaffold_package(answers, tmp_path)

        destination = (tmp_path / "src" / "packages" / "MyApp").resolve()
        assert sorted(p.name for p in written) == sorted(APPLICATION_FILES)
        for filename in APPLICATION_FILES:
            content = (destination / filename).read_text(encoding="utf-8")
            assert MARKER not in content

        meta = json.loads((destination / "metadata.json").read_text(encoding="utf-8"))
        assert meta["name"] == "MyApp"
        package = json.loads((destination / "package.json").read_text(encoding="utf-8"))
        assert package["name"] == "MyApp"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_name_is_filtered(self, tmp_path: Path):
        answers = PackageAnswers(name="My App!", target="out", confirm=True)
        await scaffold_package(answers, tmp_path)
        meta = json.loads((tmp_path / "out" / "metadata.json").read_text(encoding="utf-8"))
        assert meta["name"] == "MyApp"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_declined_writes_nothing(self, tmp_path: Path):
        answers = PackageAnswers(name="MyApp", target="out")
        assert await scaffold_package(answers, tmp_path) == []
        assert not (tmp_path / "out").exists()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_existing_destination_creates_nothing(self, tmp_path: Path):
        (tmp_path / "out").mkdir()
        answers = PackageAnswers(name="MyApp", target="out", confirm=True)
        with pytest.raises(DestinationExistsError):
            await scaffold_package(answers, tmp_path)
        assert list((tmp_path / "out").iterdir()) == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_installed_name_refused(self, real_project: Path, node_modules: Path):
        packages = discover_packages(node_modules)
        answers = PackageAnswers(name="Draw", target="src/packages/Draw", confirm=True)
        with pytest.raises(InvalidNameError):
            await scaffold_package(answers, real_project, packages)
        assert not (real_project / "src").exists()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_name_refused(self, tmp_path: Path):
        answers = PackageAnswers(name="---", target="out", confirm=True)
        with pytest.raises(InvalidNameError):
            await scaffold_package(answers, tmp_path)
        assert not (tmp_path / "out").exists()
