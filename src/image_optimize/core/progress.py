"""逐文件事件与进度的数据模型。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class FileEvent:
    """单个文件处理完成后发出的结构化事件，由调用方决定如何呈现。"""

    category: str  # skipped | optimized | copied | failed
    file_name: str
    total: int
    completed: int
    message: Optional[str] = None
    duration_ms: Optional[int] = None
