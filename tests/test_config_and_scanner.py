"""配置解析与候选文件扫描。"""

from __future__ import annotations

from pathlib import Path

import pytest

from image_optimize.core.config import (
    OptimizeConfig,
    ProcessingMode,
    normalize_timeout,
    parse_processing_mode,
    resolve_settings,
)
from image_optimize.core.exceptions import InvalidConfigurationError
from image_optimize.core.scanner import collect_candidates


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("yes", ProcessingMode.MUST),
        ("TRUE", ProcessingMode.MUST),
        (None, ProcessingMode.MUST),
        ("no", ProcessingMode.MUST_NOT),
        (" False ", ProcessingMode.MUST_NOT),
        ("try", ProcessingMode.SHOULD),
    ],
)
def test_parse_processing_mode(raw, expected) -> None:
    assert parse_processing_mode(raw) is expected


@pytest.mark.parametrize("raw", ["maybe", "", "1"])
def test_invalid_processing_mode(raw: str) -> None:
    with pytest.raises(InvalidConfigurationError):
        parse_processing_mode(raw)


def test_timeout_zero_or_negative_disables() -> None:
    assert normalize_timeout(0) is None
    assert normalize_timeout(-5) is None
    assert normalize_timeout(1500) == 1500


def test_resolve_settings_defaults(tmp_path: Path) -> None:
    settings = resolve_settings(OptimizeConfig(source_dir=tmp_path, command=""))

    assert settings.dest_dir == tmp_path
    assert settings.command == "optipng"
    assert settings.timeout_ms == 60_000
    assert settings.mode is ProcessingMode.MUST


def test_missing_source_directory(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigurationError, match="不存在"):
        resolve_settings(OptimizeConfig(source_dir=tmp_path / "missing"))


def test_destination_must_be_directory(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x")

    with pytest.raises(InvalidConfigurationError, match="不是目录"):
        resolve_settings(OptimizeConfig(source_dir=tmp_path, dest_dir=target))


def test_invalid_mode_is_reported_before_processing(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigurationError, match="process"):
        resolve_settings(OptimizeConfig(source_dir=tmp_path, process="sometimes"))


def test_collect_candidates_is_recursive_and_sorted(tmp_path: Path) -> None:
    (tmp_path / "B.png").write_bytes(b"x")
    (tmp_path / "a.gif").write_bytes(b"x")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.txt").write_bytes(b"x")

    assert collect_candidates(tmp_path) == ["a.gif", "B.png", "sub/c.txt"]


def test_collect_candidates_patterns(tmp_path: Path) -> None:
    (tmp_path / "logo.PNG").write_bytes(b"x")
    (tmp_path / "draft_logo.png").write_bytes(b"x")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "icon.png").write_bytes(b"x")
    (tmp_path / "sub" / "icon.gif").write_bytes(b"x")

    assert collect_candidates(tmp_path, include_patterns=("*.png",), exclude_patterns=("draft_*",)) == [
        "logo.PNG",
        "sub/icon.png",
    ]
    assert collect_candidates(tmp_path, exclude_patterns=("sub/*",)) == ["draft_logo.png", "logo.PNG"]
