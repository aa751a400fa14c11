"""日志配置。"""

from __future__ import annotations

import logging


def setup_logging(verbose: bool = False) -> None:
    """初始化日志；verbose 时输出逐文件的跳过/优化/复制明细。"""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
