"""逐文件处理决策：跳过、优化或仅复制。"""

from __future__ import annotations

from enum import Enum

from image_optimize.core.models import FileTask

SUPPORTED_EXTENSIONS = {".gif", ".bmp", ".png", ".pnm", ".tif", ".tiff"}


class Decision(Enum):
    SKIP_UNSUPPORTED_TYPE = "skip-unsupported-type"
    SKIP_UP_TO_DATE = "skip-up-to-date"
    SKIP_EMPTY_INPUT = "skip-empty-input"
    OPTIMIZE = "optimize"
    COPY_ONLY = "copy-only"


def is_supported(file_name: str) -> bool:
    lowered = file_name.lower()
    return any(lowered.endswith(ext) for ext in SUPPORTED_EXTENSIONS)


def is_up_to_date(task: FileTask) -> bool:
    """输出文件存在且修改时间严格晚于输入文件。"""

    try:
        output_mtime = task.output_path.stat().st_mtime_ns
    except OSError:
        # 不存在或无法访问时视为需要重新处理
        return False
    return output_mtime > task.input_mtime_ns


def classify(task: FileTask, transform_enabled: bool) -> Decision:
    """按顺序应用规则，首个命中的规则生效。"""

    if not is_supported(task.relative_name):
        return Decision.SKIP_UNSUPPORTED_TYPE
    if is_up_to_date(task):
        return Decision.SKIP_UP_TO_DATE
    if task.input_size == 0:
        return Decision.SKIP_EMPTY_INPUT
    if not transform_enabled:
        return Decision.COPY_ONLY
    return Decision.OPTIMIZE
