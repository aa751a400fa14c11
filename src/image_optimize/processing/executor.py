"""单个文件的优化执行与回退复制。"""

from __future__ import annotations

import logging
import shutil
import time
from typing import Optional

from image_optimize.core.config import OptimizerSettings, ProcessingMode
from image_optimize.core.models import Copied, Failed, FileOutcome, FileTask, Optimized, ProcessResult
from image_optimize.processing.runner import CommandRunner, run_command

LOGGER = logging.getLogger(__name__)


def build_command(command: str, task: FileTask) -> list[str]:
    return [command, "-fix", "-force", "-out", str(task.output_path), "--", str(task.input_path)]


def optimize_file(
    task: FileTask,
    settings: OptimizerSettings,
    runner: CommandRunner = run_command,
) -> FileOutcome:
    """调用优化器处理单个文件，失败时按模式决定是否回退为复制。"""

    start = time.monotonic()
    try:
        task.output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return Failed(reason=f"无法创建输出目录 {task.output_path.parent}: {exc}")

    result = runner(build_command(settings.command, task), settings.timeout_ms)
    failure = _check_failure(result, task)
    duration = _elapsed_ms(start)

    if failure is None:
        return Optimized(duration_ms=duration)

    reason = f"优化 {task.input_path} 失败: {failure}"
    if settings.mode is ProcessingMode.MUST:
        _discard_output(task)
        return Failed(reason=reason)

    LOGGER.warning("%s，回退为直接复制", reason)
    return copy_file(task, note=reason, start=start)


def copy_file(task: FileTask, note: Optional[str] = None, start: Optional[float] = None) -> FileOutcome:
    """逐字节复制输入文件到输出路径，不复制时间戳等元数据。"""

    if start is None:
        start = time.monotonic()
    try:
        task.output_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(task.input_path, task.output_path)
    except shutil.SameFileError:
        # 源目录与目标目录相同且扩展名已是 .png：无需复制
        pass
    except OSError as exc:
        return Failed(reason=f"复制 {task.input_path} 到 {task.output_path} 失败: {exc}")
    return Copied(duration_ms=_elapsed_ms(start), note=note)


def _discard_output(task: FileTask) -> None:
    """删除失败调用留下的输出，避免下次运行将其误判为最新。"""

    if task.output_path == task.input_path:
        return
    try:
        task.output_path.unlink(missing_ok=True)
    except OSError as exc:
        LOGGER.warning("无法删除失败的输出文件 %s: %s", task.output_path, exc)


def _check_failure(result: ProcessResult, task: FileTask) -> Optional[str]:
    """返回失败原因；成功时返回 None。

    stderr 只要有内容即视为失败，即使退出码为 0。
    """

    stderr = result.stderr.strip()
    if not result.succeeded:
        failure_text = result.describe_failure()
        return f"{failure_text}: {stderr}" if stderr else failure_text
    if stderr:
        return stderr
    if not task.output_path.exists():
        return "未生成输出文件"
    if task.output_path.stat().st_size < 1:
        return "生成的输出文件为空"
    return None


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
