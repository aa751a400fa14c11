"""候选文件扫描与 include/exclude 过滤。"""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from typing import Iterator, Sequence


def _iter_files(root: Path) -> Iterator[Path]:
    for candidate in root.rglob("*"):
        if candidate.is_file():
            yield candidate


def _matches_any(relative_name: str, patterns: Sequence[str]) -> bool:
    lowered = relative_name.lower()
    name = lowered.rsplit("/", 1)[-1]
    return any(fnmatch(lowered, pattern.lower()) or fnmatch(name, pattern.lower()) for pattern in patterns)


def collect_candidates(
    source_dir: Path,
    include_patterns: Sequence[str] = (),
    exclude_patterns: Sequence[str] = (),
) -> list[str]:
    """递归扫描源目录，返回排序后的相对路径（POSIX 风格）。

    未指定 include 时包含全部文件；exclude 优先于 include。
    文件类型过滤不在此处进行，由决策策略负责。
    """

    collected: list[str] = []
    for candidate in _iter_files(source_dir):
        relative = candidate.relative_to(source_dir).as_posix()
        if include_patterns and not _matches_any(relative, include_patterns):
            continue
        if exclude_patterns and _matches_any(relative, exclude_patterns):
            continue
        collected.append(relative)

    collected.sort(key=str.lower)
    return collected
