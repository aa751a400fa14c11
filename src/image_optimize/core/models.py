"""核心数据模型定义。"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

OUTPUT_SUFFIX = ".png"
_EXTENSION_RE = re.compile(r"\.[a-zA-Z]+$")


def output_name_for(relative_name: str) -> str:
    """输出文件名：保留相对路径，仅将扩展名替换为优化器的原生格式。"""

    return _EXTENSION_RE.sub(OUTPUT_SUFFIX, relative_name, count=1)


@dataclass(frozen=True, slots=True)
class FileTask:
    """一个待处理的候选文件。"""

    relative_name: str
    input_path: Path
    output_path: Path
    input_mtime_ns: int
    input_size: int

    @classmethod
    def from_relative(cls, source_dir: Path, dest_dir: Path, relative_name: str) -> "FileTask":
        """根据源文件的当前状态构建任务；源文件不存在时抛出 OSError。"""

        input_path = source_dir / relative_name
        stat = input_path.stat()
        return cls(
            relative_name=relative_name,
            input_path=input_path,
            output_path=dest_dir / output_name_for(relative_name),
            input_mtime_ns=stat.st_mtime_ns,
            input_size=stat.st_size,
        )


class SkipReason(Enum):
    UNSUPPORTED_TYPE = "unsupported-type"
    UP_TO_DATE = "up-to-date"
    EMPTY_INPUT = "empty-input"


SKIP_MESSAGES = {
    SkipReason.UNSUPPORTED_TYPE: "文件类型不受支持",
    SkipReason.UP_TO_DATE: "输出文件较新",
    SkipReason.EMPTY_INPUT: "文件为空",
}


@dataclass(frozen=True, slots=True)
class Skipped:
    reason: SkipReason


@dataclass(frozen=True, slots=True)
class Optimized:
    duration_ms: int


@dataclass(frozen=True, slots=True)
class Copied:
    duration_ms: int
    note: Optional[str] = None  # 回退复制时记录优化失败原因


@dataclass(frozen=True, slots=True)
class Failed:
    reason: str


FileOutcome = Union[Skipped, Optimized, Copied, Failed]


@dataclass(frozen=True, slots=True)
class FileRecord:
    """单个文件的处理记录（用于报告/日志）。"""

    task: FileTask
    outcome: FileOutcome


@dataclass(slots=True)
class BatchResult:
    """批处理的累计结果，运行过程中逐步更新，结束时定稿。"""

    optimized: int = 0
    copied: int = 0
    skipped: int = 0
    failed: int = 0
    duration_ms: int = 0
    records: list[FileRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.optimized + self.copied + self.skipped + self.failed

    @property
    def succeeded(self) -> bool:
        return self.failed == 0

    def record(self, task: FileTask, outcome: FileOutcome) -> None:
        """将单个文件的结果计入对应的计数器。"""

        match outcome:
            case Skipped():
                self.skipped += 1
            case Optimized():
                self.optimized += 1
            case Copied():
                self.copied += 1
            case Failed():
                self.failed += 1
            case _:
                raise TypeError(f"未知的处理结果类型: {outcome!r}")
        self.records.append(FileRecord(task=task, outcome=outcome))

    def summary(self) -> str:
        if self.failed:
            return (
                f"{self.failed} 个文件优化和/或复制失败；{self.optimized} 个文件已优化；"
                f"{self.copied} 个文件已复制；{self.skipped} 个文件已跳过。总耗时 {self.duration_ms} ms。"
            )
        return (
            f"{self.optimized} 个文件已优化，{self.copied} 个文件已复制，耗时 {self.duration_ms} ms；"
            f"{self.skipped} 个文件已跳过。"
        )


class InvocationStatus(Enum):
    COMPLETED = "completed"
    TIMED_OUT = "timed-out"
    START_FAILED = "start-failed"


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """一次外部命令调用的结果。"""

    status: InvocationStatus
    exit_code: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status is InvocationStatus.COMPLETED and self.exit_code == 0

    def describe_failure(self) -> str:
        if self.status is InvocationStatus.TIMED_OUT:
            return "执行超时"
        if self.status is InvocationStatus.START_FAILED:
            return f"无法启动命令: {self.error}" if self.error else "无法启动命令"
        return f"退出码 {self.exit_code}"
