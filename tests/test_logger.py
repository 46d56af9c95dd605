"""
日志模块测试
============
"""

import logging

from tinylink.utils.logger import ColoredFormatter, get_logger, set_level, setup_logger


class TestLogger:
    """日志器测试类"""

    def test_get_logger_is_cached(self):
        assert get_logger("tinylink.test.cache") is get_logger("tinylink.test.cache")

    def test_setup_logger_accepts_level_name(self):
        logger = setup_logger("tinylink.test.level", level="debug", console_output=False)

        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_set_level(self):
        logger = get_logger("tinylink.test.set_level")

        set_level("WARNING")
        try:
            assert logger.level == logging.WARNING
        finally:
            set_level(logging.INFO)

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "link.log"
        logger = setup_logger("tinylink.test.file", log_file=str(log_file), console_output=False)

        logger.warning("帧CRC错误")
        for handler in logger.handlers:
            handler.close()

        assert "帧CRC错误" in log_file.read_text(encoding="utf-8")

    def test_colored_formatter_without_color(self):
        record = logging.LogRecord(
            "tinylink", logging.ERROR, "/src/tinylink/core/frame_handler.py", 42,
            "负载过长: %d", (300,), None, func="write",
        )

        text = ColoredFormatter(use_color=False).format(record)

        assert "E 负载过长: 300" in text
        assert text.endswith("[frame_handler.py.write():42]")
        assert "\033[" not in text
