"""批处理流水线：扫描、逐文件决策、优化/复制与结果汇总。"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Sequence

from image_optimize.core.config import OptimizeConfig, OptimizerSettings, ProcessingMode, resolve_settings
from image_optimize.core.exceptions import BatchFailedError
from image_optimize.core.models import BatchResult, FileOutcome, FileTask, SkipReason, Skipped
from image_optimize.core.progress import FileEvent
from image_optimize.core.report import describe_outcome, write_csv_report
from image_optimize.core.scanner import collect_candidates
from image_optimize.processing.executor import copy_file, optimize_file
from image_optimize.processing.policy import Decision, classify
from image_optimize.processing.probe import probe_optimizer
from image_optimize.processing.runner import CommandRunner, run_command

LOGGER = logging.getLogger(__name__)


EventCallback = Optional[Callable[[FileEvent], None]]

_SKIP_REASONS = {
    Decision.SKIP_UNSUPPORTED_TYPE: SkipReason.UNSUPPORTED_TYPE,
    Decision.SKIP_UP_TO_DATE: SkipReason.UP_TO_DATE,
    Decision.SKIP_EMPTY_INPUT: SkipReason.EMPTY_INPUT,
}


def process_batch(
    config: OptimizeConfig,
    runner: CommandRunner = run_command,
    event_callback: EventCallback = None,
) -> BatchResult:
    """批量处理入口：校验配置、探测优化器、扫描并逐个处理文件。

    存在失败文件时抛出 BatchFailedError（其 result 属性携带完整统计）。
    """

    settings = resolve_settings(config)
    candidates = collect_candidates(settings.source_dir, config.include_patterns, config.exclude_patterns)
    LOGGER.info("发现 %d 个候选文件", len(candidates))

    result = run_batch(candidates, settings, runner=runner, event_callback=event_callback)

    if config.report_filename:
        _write_report(settings, result, config.report_filename)

    if not result.succeeded:
        raise BatchFailedError(result.summary(), result)

    LOGGER.info("%s", result.summary())
    return result


def run_batch(
    candidates: Sequence[str],
    settings: OptimizerSettings,
    runner: CommandRunner = run_command,
    event_callback: EventCallback = None,
) -> BatchResult:
    """按给定顺序逐个处理候选文件，单个文件失败不会中断整个批次。"""

    command_available = probe_optimizer(settings, runner)
    transform = settings.mode is not ProcessingMode.MUST_NOT and command_available

    LOGGER.debug("从 %s 处理到 %s", settings.source_dir, settings.dest_dir)
    start = time.monotonic()
    result = BatchResult()
    total = len(candidates)

    for relative_name in candidates:
        try:
            task = FileTask.from_relative(settings.source_dir, settings.dest_dir, relative_name)
        except FileNotFoundError:
            # 扫描之后被删除的文件不计入统计
            LOGGER.debug("文件已不存在，忽略：%s", relative_name)
            continue

        outcome = _process_file(task, transform, settings, runner)
        result.record(task, outcome)
        _emit_event(event_callback, task, outcome, completed=result.total, total=total)

    result.duration_ms = int((time.monotonic() - start) * 1000)
    return result


def _process_file(
    task: FileTask,
    transform: bool,
    settings: OptimizerSettings,
    runner: CommandRunner,
) -> FileOutcome:
    decision = classify(task, transform)
    if decision is Decision.OPTIMIZE:
        return optimize_file(task, settings, runner)
    if decision is Decision.COPY_ONLY:
        return copy_file(task)
    return Skipped(reason=_SKIP_REASONS[decision])


def _emit_event(
    callback: EventCallback,
    task: FileTask,
    outcome: FileOutcome,
    completed: int,
    total: int,
) -> None:
    category, message, duration = describe_outcome(outcome)
    event = FileEvent(
        category=category,
        file_name=task.relative_name,
        total=total,
        completed=completed,
        message=message,
        duration_ms=duration,
    )

    if category == "failed":
        LOGGER.error("处理失败 %s：%s", task.relative_name, message)
    elif category == "skipped":
        LOGGER.debug("跳过 %s：%s", task.relative_name, message)
    else:
        LOGGER.debug("%s %s，耗时 %d ms", category, task.relative_name, duration)

    if callback:
        callback(event)


def _write_report(settings: OptimizerSettings, result: BatchResult, filename: str) -> None:
    try:
        write_csv_report(result.records, settings.dest_dir, filename)
    except OSError as exc:
        LOGGER.error("写入报告失败：%s", exc)
