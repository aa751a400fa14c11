"""优化器可用性探测。"""

from __future__ import annotations

import logging
import re

from image_optimize.core.config import OptimizerSettings, ProcessingMode
from image_optimize.core.exceptions import OptimizerUnavailableError
from image_optimize.processing.runner import CommandRunner, run_command

LOGGER = logging.getLogger(__name__)

VERSION_RE = re.compile(r"^[^0-9]*([0-9]+(\.[0-9]+)*)")


def extract_version(output: str) -> str:
    """取输出中第一段由数字和点组成的版本号，找不到时返回 unknown。"""

    match = VERSION_RE.search(output)
    return match.group(1) if match else "unknown"


def probe_optimizer(settings: OptimizerSettings, runner: CommandRunner = run_command) -> bool:
    """运行 ``<command> -version`` 判断优化器是否可用。

    MUST_NOT 模式下直接返回 False，不会执行任何命令。
    MUST 模式下探测失败抛出 OptimizerUnavailableError；SHOULD 模式下仅记录警告。
    """

    if settings.mode is ProcessingMode.MUST_NOT:
        return False

    command = settings.command
    result = runner([command, "-version"], settings.timeout_ms)

    if not result.succeeded:
        message = f'无法执行优化命令 "{command}"：运行 "{command} -version" {result.describe_failure()}'
        if settings.mode is ProcessingMode.MUST:
            raise OptimizerUnavailableError(message)
        LOGGER.warning("%s，将直接复制文件", message)
        return False

    version = extract_version(result.stdout + result.stderr)
    LOGGER.debug('使用命令 "%s"，版本 %s', command, version)
    return True
