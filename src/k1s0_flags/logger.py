"""CLI 向けのログ設定（structlog + 標準 logging の統合）"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LIBRARY_LOGGER = "k1s0_flags"


def configure_logging(
    level: str = "WARNING",
    format: str = "json",
    stream: TextIO | None = None,
) -> structlog.stdlib.BoundLogger:
    """k1s0_flags 配下のログを structlog で整形して出力する。

    ライブラリ内部は標準 logging に extra= で文脈を渡しているため、
    ProcessorFormatter で structlog のイベントと同じ形式にそろえる。
    ハンドラは呼び出しごとに差し替えるので、複数回呼んでも出力は重複しない。

    Args:
        level: ログレベル ("DEBUG", "INFO", "WARNING", "ERROR")
        format: 出力形式 ("json" or "text")
        stream: 出力先。省略時は呼び出し時点の sys.stderr

    Returns:
        CLI 用の structlog.stdlib.BoundLogger
    """
    shared: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[*shared, structlog.stdlib.ExtraAdder()],
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    library_logger = logging.getLogger(LIBRARY_LOGGER)
    library_logger.handlers = [handler]
    library_logger.setLevel(level.upper())
    library_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    return structlog.stdlib.get_logger(f"{LIBRARY_LOGGER}.cli")
