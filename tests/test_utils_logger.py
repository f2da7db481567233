import logging
from unittest.mock import MagicMock, patch

from app.utils.logger import HIJACKED_LOGGERS, InterceptHandler, setup_logging


def make_record(name: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=1,
        msg="Test message %s",
        args=("arg",),
        exc_info=None,
    )


class TestInterceptHandler:
    """Test the InterceptHandler class."""

    def test_intercept_handler_is_logging_handler(self):
        assert isinstance(InterceptHandler(), logging.Handler)

    def test_intercept_handler_ignores_opentelemetry_logs(self):
        """OpenTelemetry's own records are dropped to avoid an export loop."""
        with patch("app.utils.logger.logger") as mock_logger:
            InterceptHandler().emit(make_record("opentelemetry.sdk.trace"))

            mock_logger.opt.assert_not_called()

    def test_intercept_handler_forwards_formatted_message(self):
        with patch("app.utils.logger.logger") as mock_logger:
            mock_opt = MagicMock()
            mock_logger.opt.return_value = mock_opt
            mock_logger.level.return_value.name = "INFO"

            InterceptHandler().emit(make_record("uvicorn.error"))

            mock_opt.log.assert_called_once_with("INFO", "Test message arg")

    def test_intercept_handler_unknown_level_falls_back_to_number(self):
        with patch("app.utils.logger.logger") as mock_logger:
            mock_opt = MagicMock()
            mock_logger.opt.return_value = mock_opt
            mock_logger.level.side_effect = ValueError("unknown level")

            InterceptHandler().emit(make_record("custom", level=25))

            assert mock_opt.log.call_args[0][0] == 25


class TestSetupLogging:
    @patch.dict("os.environ", {}, clear=True)
    @patch("app.utils.logger.logger")
    def test_setup_logging_hijacks_std_loggers(self, mock_logger):
        result = setup_logging()

        assert result is mock_logger
        assert isinstance(logging.root.handlers[0], InterceptHandler)
        for name in HIJACKED_LOGGERS:
            std_logger = logging.getLogger(name)
            assert std_logger.propagate is False
            assert any(isinstance(h, InterceptHandler) for h in std_logger.handlers)
        mock_logger.remove.assert_called_once()
        mock_logger.add.assert_called_once()

    @patch.dict("os.environ", {"OTEL_EXPORTER_OTLP_ENDPOINT": "http://localhost:4317"})
    @patch("app.utils.logger._add_otlp_sink")
    @patch("app.utils.logger.logger")
    def test_setup_logging_adds_otlp_sink(self, mock_logger, mock_sink):
        setup_logging()

        mock_sink.assert_called_once_with("http://localhost:4317", "INFO")

    @patch.dict("os.environ", {"OTEL_EXPORTER_OTLP_ENDPOINT": "http://localhost:4317"})
    @patch("app.utils.logger._add_otlp_sink", side_effect=RuntimeError("no collector"))
    @patch("app.utils.logger.logger")
    def test_setup_logging_survives_otlp_failure(self, mock_logger, mock_sink, capsys):
        setup_logging()

        assert "Log Setup Failed" in capsys.readouterr().err
