"""命令行入口的端到端测试。"""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image
from typer.testing import CliRunner

from spookify.cli.main import app

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_help_short_circuits_without_writes(workdir: Path) -> None:
    (workdir / "a").mkdir()

    result = runner.invoke(app, ["a", "--help"])

    assert result.exit_code == 0
    assert "Usage: spookify" in result.output
    assert "--output=dest" in result.output
    assert sorted(p.name for p in workdir.iterdir()) == ["a"]


def test_version_banner(workdir: Path) -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "spookify v" in result.output
    assert not (workdir / "dest").exists()


def test_second_positional_prints_error_and_exits_zero(workdir: Path) -> None:
    result = runner.invoke(app, ["one", "two"])

    assert result.exit_code == 0
    assert "You did something wrong" in result.output
    assert not (workdir / "dest").exists()


def test_strict_malformed_invocation_exits_non_zero(workdir: Path) -> None:
    result = runner.invoke(app, ["one", "two", "--strict"])

    assert result.exit_code == 2


def test_missing_input_prints_error(workdir: Path) -> None:
    result = runner.invoke(app, ["--output=out"])

    assert result.exit_code == 0
    assert "You did something wrong" in result.output


def test_invalid_flag_value_prints_error(workdir: Path) -> None:
    (workdir / "a").mkdir()

    result = runner.invoke(app, ["a", "--seed=abc"])

    assert result.exit_code == 0
    assert "You did something wrong" in result.output
    assert "--seed" in result.output


def test_scenario_png_and_notes(workdir: Path) -> None:
    source = workdir / "a"
    source.mkdir()
    Image.new("RGB", (200, 200), (30, 30, 30)).save(source / "a.png")
    (source / "notes.txt").write_text("trick or treat")

    result = runner.invoke(app, ["a", "--output=out", "--seed=1"])

    assert result.exit_code == 0, result.output
    assert "Successful spookification" in result.output
    assert "1 image(s)" in result.output
    assert str(Path("out") / "a.png") in result.output
    assert (workdir / "out" / "a.png").read_bytes() != (source / "a.png").read_bytes()
    assert (workdir / "out" / "notes.txt").read_bytes() == (source / "notes.txt").read_bytes()


def test_default_destination_is_dest(workdir: Path) -> None:
    source = workdir / "photos"
    (source / "sub").mkdir(parents=True)
    Image.new("RGB", (50, 50), "white").save(source / "sub" / "x.png")

    result = runner.invoke(app, ["photos"])

    assert result.exit_code == 0, result.output
    assert (workdir / "dest" / "sub" / "x.png").exists()


def test_empty_input_prints_success(workdir: Path) -> None:
    (workdir / "empty").mkdir()

    result = runner.invoke(app, ["empty"])

    assert result.exit_code == 0
    assert "Successful spookification" in result.output
    assert "0 image(s)" in result.output


def test_failure_banner_contains_error_message(workdir: Path) -> None:
    source = workdir / "a"
    source.mkdir()
    Image.new("RGB", (40, 40), "white").save(source / "1.png")
    (source / "2.png").write_text("corrupt")
    Image.new("RGB", (40, 40), "white").save(source / "3.png")

    result = runner.invoke(app, ["a", "--output=out"])

    assert result.exit_code == 0
    assert "Something went wrong" in result.output
    assert "Error message:" in result.output
    assert "2.png" in result.output
    assert (workdir / "out" / "1.png").exists()
    assert not (workdir / "out" / "3.png").exists()


def test_strict_failure_exits_one(workdir: Path) -> None:
    result = runner.invoke(app, ["missing", "--strict"])

    assert result.exit_code == 1
    assert "Something went wrong" in result.output


def test_custom_assets_directory(workdir: Path) -> None:
    source = workdir / "a"
    source.mkdir()
    Image.new("RGB", (40, 40), "white").save(source / "1.png")
    (workdir / "assets").mkdir()

    result = runner.invoke(app, ["a", "--assets=assets"])

    assert "Something went wrong" in result.output
    assert "pumpkin" in result.output


def test_empty_output_value_falls_back_to_dest(workdir: Path) -> None:
    source = workdir / "a"
    source.mkdir()
    Image.new("RGB", (40, 40), "white").save(source / "1.png")

    result = runner.invoke(app, ["a", "--output="])

    assert result.exit_code == 0, result.output
    assert "Successful spookification" in result.output
    assert (workdir / "dest" / "1.png").exists()


def test_processing_line_shows_position(workdir: Path) -> None:
    source = workdir / "a"
    source.mkdir()
    for name in ("1.png", "2.png"):
        Image.new("RGB", (40, 40), "white").save(source / name)

    result = runner.invoke(app, ["a", "--output=out"])

    assert "[1/2]" in result.output
    assert "[2/2]" in result.output


def test_strict_with_value_applies_to_malformed_invocation(workdir: Path) -> None:
    result = runner.invoke(app, ["one", "two", "--strict=1"])

    assert result.exit_code == 2
    assert "You did something wrong" in result.output
