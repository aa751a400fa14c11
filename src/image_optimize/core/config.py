"""优化任务的配置模型与参数解析。"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from image_optimize.core.exceptions import InvalidConfigurationError

DEFAULT_COMMAND = "optipng"
DEFAULT_TIMEOUT_MS = 60_000


class ProcessingMode(Enum):
    """整个批次共用的优化策略。"""

    MUST = "must"  # 必须优化，任何失败都会导致批次失败
    MUST_NOT = "must-not"  # 从不优化，直接复制
    SHOULD = "should"  # 尝试优化，失败时逐个文件回退为复制


_MODE_ALIASES = {
    "yes": ProcessingMode.MUST,
    "true": ProcessingMode.MUST,
    "no": ProcessingMode.MUST_NOT,
    "false": ProcessingMode.MUST_NOT,
    "try": ProcessingMode.SHOULD,
}


@dataclass(slots=True)
class OptimizeConfig:
    """单次批处理任务的原始配置（由调用方或 CLI 提供）。"""

    source_dir: Path
    dest_dir: Optional[Path] = None
    process: Optional[str] = None
    command: Optional[str] = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    include_patterns: Sequence[str] = field(default_factory=tuple)
    exclude_patterns: Sequence[str] = field(default_factory=tuple)
    report_filename: Optional[str] = None


@dataclass(frozen=True, slots=True)
class OptimizerSettings:
    """经过校验的运行参数，在批次开始时解析一次并显式传递。"""

    source_dir: Path
    dest_dir: Path
    mode: ProcessingMode
    command: str = DEFAULT_COMMAND
    timeout_ms: Optional[int] = DEFAULT_TIMEOUT_MS


def parse_processing_mode(value: Optional[str]) -> ProcessingMode:
    """将 yes/true、no/false、try 解析为处理模式；未设置时视为 MUST。"""

    if value is None:
        return ProcessingMode.MUST

    mode = _MODE_ALIASES.get(value.strip().lower())
    if mode is None:
        raise InvalidConfigurationError(f'无效的 process 取值: "{value}"（可选 yes/true、no/false、try）')
    return mode


def normalize_timeout(timeout_ms: Optional[int]) -> Optional[int]:
    """0 或负数表示不设超时。"""

    if timeout_ms is None or timeout_ms <= 0:
        return None
    return int(timeout_ms)


def resolve_settings(config: OptimizeConfig) -> OptimizerSettings:
    """校验目录与参数，得到本次批处理使用的不可变设置。"""

    source_dir = Path(config.source_dir).expanduser()
    dest_dir = Path(config.dest_dir).expanduser() if config.dest_dir is not None else source_dir

    check_directory("源目录", source_dir, must_be_readable=True)
    check_directory("目标目录", dest_dir, must_be_writable=True)

    return OptimizerSettings(
        source_dir=source_dir,
        dest_dir=dest_dir,
        mode=parse_processing_mode(config.process),
        command=config.command or DEFAULT_COMMAND,
        timeout_ms=normalize_timeout(config.timeout_ms),
    )


def check_directory(
    description: str,
    path: Path,
    *,
    must_be_readable: bool = False,
    must_be_writable: bool = False,
) -> None:
    """确认路径是存在的目录，并按需检查读写权限。"""

    if not path.exists():
        raise InvalidConfigurationError(f'{description} ("{path}") 不存在')
    if not path.is_dir():
        raise InvalidConfigurationError(f'{description} ("{path}") 不是目录')
    if must_be_readable and not os.access(path, os.R_OK):
        raise InvalidConfigurationError(f'{description} ("{path}") 不可读')
    if must_be_writable and not os.access(path, os.W_OK):
        raise InvalidConfigurationError(f'{description} ("{path}") 不可写')
