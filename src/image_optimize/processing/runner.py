"""外部命令执行：超时控制与标准输出/错误分别捕获。"""

from __future__ import annotations

import logging
import subprocess
from typing import Callable, Optional, Sequence

from image_optimize.core.models import InvocationStatus, ProcessResult

LOGGER = logging.getLogger(__name__)

CommandRunner = Callable[[Sequence[str], Optional[int]], ProcessResult]


def run_command(args: Sequence[str], timeout_ms: Optional[int] = None) -> ProcessResult:
    """运行外部命令并等待结束。

    ``communicate`` 会同时读取 stdout 与 stderr，子进程写满任一管道都不会阻塞。
    超时后强制结束子进程，结果状态为 TIMED_OUT；无法启动时为 START_FAILED。
    不做任何重试。
    """

    timeout = timeout_ms / 1000.0 if timeout_ms and timeout_ms > 0 else None
    LOGGER.debug("执行命令: %s", " ".join(args))

    try:
        process = subprocess.Popen(
            list(args),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as exc:
        LOGGER.debug("无法启动命令 %s: %s", args[0], exc)
        return ProcessResult(status=InvocationStatus.START_FAILED, error=str(exc))

    with process:
        try:
            stdout, stderr = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            stdout, stderr = process.communicate()
            LOGGER.debug("命令超时（%s ms），已终止: %s", timeout_ms, args[0])
            return ProcessResult(
                status=InvocationStatus.TIMED_OUT,
                stdout=stdout or "",
                stderr=stderr or "",
                error=f"超过 {timeout_ms} ms 未结束",
            )

    return ProcessResult(
        status=InvocationStatus.COMPLETED,
        exit_code=process.returncode,
        stdout=stdout or "",
        stderr=stderr or "",
    )
