"""日志工具。"""

from __future__ import annotations

import logging


def setup_logging(level: int = logging.INFO) -> None:
    """初始化项目日志配置。"""

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("spookify").setLevel(level)
    # Pillow 在 DEBUG 级别会输出每个插件的加载信息。
    logging.getLogger("PIL").setLevel(max(level, logging.INFO))
