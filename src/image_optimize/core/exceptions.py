"""项目内使用的自定义异常定义。"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from image_optimize.core.models import BatchResult


class ImageOptimizeError(Exception):
    """基础异常类型。"""


class InvalidConfigurationError(ImageOptimizeError):
    """配置不合法时抛出。"""


class OptimizerUnavailableError(ImageOptimizeError):
    """必须优化（MUST）模式下优化器不可用时抛出。"""


class BatchFailedError(ImageOptimizeError):
    """批处理结束后存在失败文件时抛出，附带完整的统计结果。"""

    def __init__(self, message: str, result: "BatchResult") -> None:
        super().__init__(message)
        self.result = result
