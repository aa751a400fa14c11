"""测试共用的假优化器。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import pytest

from image_optimize.core.models import InvocationStatus, ProcessResult


class FakeOptimizer:
    """模拟 optipng 命令行为的 runner，可按输入文件名注入各种失败。"""

    def __init__(
        self,
        *,
        version_output: str = "OptiPNG version 0.6.3\n",
        available: bool = True,
        stderr_for: Sequence[str] = (),
        timeout_for: Sequence[str] = (),
        exit_code_for: Sequence[str] = (),
        no_output_for: Sequence[str] = (),
        empty_output_for: Sequence[str] = (),
    ) -> None:
        self.version_output = version_output
        self.available = available
        self.stderr_for = set(stderr_for)
        self.timeout_for = set(timeout_for)
        self.exit_code_for = set(exit_code_for)
        self.no_output_for = set(no_output_for)
        self.empty_output_for = set(empty_output_for)
        self.calls: list[list[str]] = []

    @property
    def optimize_calls(self) -> list[list[str]]:
        return [call for call in self.calls if call[1] != "-version"]

    def __call__(self, args: Sequence[str], timeout_ms: Optional[int]) -> ProcessResult:
        args = list(args)
        self.calls.append(args)

        if args[1] == "-version":
            if not self.available:
                return ProcessResult(status=InvocationStatus.START_FAILED, error="No such file or directory")
            return ProcessResult(status=InvocationStatus.COMPLETED, exit_code=0, stdout=self.version_output)

        assert args[1:4] == ["-fix", "-force", "-out"]
        assert args[5] == "--"
        output, source = Path(args[4]), Path(args[6])
        name = source.name

        if name in self.timeout_for:
            return ProcessResult(status=InvocationStatus.TIMED_OUT, error="timed out")
        if name in self.exit_code_for:
            return ProcessResult(status=InvocationStatus.COMPLETED, exit_code=1, stderr="")
        if name in self.no_output_for:
            return ProcessResult(status=InvocationStatus.COMPLETED, exit_code=0)
        if name in self.empty_output_for:
            output.write_bytes(b"")
            return ProcessResult(status=InvocationStatus.COMPLETED, exit_code=0)

        output.write_bytes(b"optimized:" + source.read_bytes())
        if name in self.stderr_for:
            return ProcessResult(status=InvocationStatus.COMPLETED, exit_code=0, stderr="Warning: bad CRC\n")
        return ProcessResult(status=InvocationStatus.COMPLETED, exit_code=0)


@pytest.fixture
def dirs(tmp_path: Path) -> tuple[Path, Path]:
    source = tmp_path / "input"
    output = tmp_path / "output"
    source.mkdir()
    output.mkdir()
    return source, output
