"""
core/logging.py 테스트
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest

from core.constants import Paths
from core.logging import NOISY_LOGGERS, get_log_dir, get_log_file_path, setup_logging


@pytest.fixture
def restore_root_handlers():
    """setup_logging이 교체한 루트 핸들러 복원"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLogPaths:
    def test_web_log_dir(self) -> None:
        assert get_log_dir("web") == Paths.WEB_LOGS_DIR

    def test_other_process(self) -> None:
        assert get_log_dir("import_accounts") == Paths.LOGS_DIR

    def test_log_file_path(self) -> None:
        assert get_log_file_path("web").name == "web.log"


class TestSetupLogging:
    def test_handlers_and_file(self, tmp_path: Path, restore_root_handlers) -> None:
        """콘솔 + daily 파일 핸들러, 로그 파일 생성"""
        root = setup_logging("web", log_dir=tmp_path)

        assert len(root.handlers) == 2
        assert any(isinstance(h, TimedRotatingFileHandler) for h in root.handlers)
        assert (tmp_path / "web.log").exists()

    def test_noisy_loggers_quieted(self, tmp_path: Path, restore_root_handlers) -> None:
        setup_logging("web", log_dir=tmp_path)

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
