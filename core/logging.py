"""
원장 서비스 로깅

루트 로거에 콘솔(stdout) + 일 단위 롤링 파일 핸들러를 붙인다.
API 서버는 logs/web/web.log, 관리 스크립트는 logs/<이름>.log.

    from core.logging import setup_logging
    setup_logging("web")
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_RETENTION_DAYS = 7

# WARNING 미만은 버리는 외부 로거
NOISY_LOGGERS: tuple[str, ...] = (
    "aiosqlite",  # 쿼리마다 executing/completed
    "asyncio",
    "httpcore",
    "httpx",
    "uvicorn.access",
)


def get_log_dir(process_name: str) -> Path:
    return Paths.WEB_LOGS_DIR if process_name == "web" else Paths.LOGS_DIR


def get_log_file_path(process_name: str) -> Path:
    return get_log_dir(process_name) / f"{process_name}.log"


def _daily_file_handler(log_file: Path) -> TimedRotatingFileHandler:
    """자정마다 롤링 (백업: web.log.2026-10-18)"""
    handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        backupCount=LOG_RETENTION_DAYS,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"
    return handler


def setup_logging(
    process_name: str,
    console_level: int = logging.INFO,
    file_level: int = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """루트 로거 초기화

    여러 번 호출해도 핸들러가 중복되지 않도록 기존 핸들러를 교체한다.
    레벨 필터링은 핸들러에서 하므로 루트 레벨은 DEBUG.

    Args:
        process_name: "web" 또는 스크립트 이름 (로그 파일명으로 사용)
        console_level: stdout 핸들러 레벨
        file_level: 파일 핸들러 레벨
        log_dir: 로그 디렉토리 (기본: get_log_dir(process_name))

    Returns:
        루트 Logger
    """
    log_dir = log_dir or get_log_dir(process_name)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{process_name}.log"

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers: list[tuple[logging.Handler, int]] = [
        (logging.StreamHandler(sys.stdout), console_level),
        (_daily_file_handler(log_file), file_level),
    ]

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()
    for handler, level in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info(
        f"로깅 초기화: {process_name} "
        f"(console={logging.getLevelName(console_level)}, "
        f"file={log_file} {logging.getLevelName(file_level)})"
    )
    return root
