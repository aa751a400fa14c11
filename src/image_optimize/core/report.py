"""报告生成工具。"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from image_optimize.core.models import (
    SKIP_MESSAGES,
    Copied,
    Failed,
    FileOutcome,
    FileRecord,
    Optimized,
    Skipped,
)

HEADER = ["relative_name", "source_path", "output_path", "status", "message", "duration_ms"]


def write_csv_report(records: Iterable[FileRecord], output_dir: Path, filename: str) -> Path:
    """将处理结果写入 CSV 报告。"""

    report_path = output_dir / filename
    with report_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(HEADER)
        for record in records:
            status, message, duration = describe_outcome(record.outcome)
            writer.writerow(
                [
                    record.task.relative_name,
                    str(record.task.input_path),
                    str(record.task.output_path) if status in {"optimized", "copied"} else "",
                    status,
                    message or "",
                    "" if duration is None else str(duration),
                ]
            )
    return report_path


def describe_outcome(outcome: FileOutcome) -> tuple[str, str | None, int | None]:
    """返回 (状态, 说明, 耗时) 三元组，供报告与事件共用。"""

    match outcome:
        case Skipped(reason=reason):
            return "skipped", SKIP_MESSAGES[reason], None
        case Optimized(duration_ms=duration):
            return "optimized", None, duration
        case Copied(duration_ms=duration, note=note):
            return "copied", note, duration
        case Failed(reason=reason):
            return "failed", reason, None
    raise TypeError(f"未知的处理结果类型: {outcome!r}")
