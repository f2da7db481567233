import logging
import sys
import os
from types import FrameType
from loguru import logger
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry._logs import set_logger_provider

from app.core.config import get_settings

HIJACKED_LOGGERS = (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "gunicorn.error",
    "gunicorn.access",
    "fastapi",
    "sqlalchemy.engine",
)


class InterceptHandler(logging.Handler):
    """
    Redirects standard logging to Loguru.
    Skips OpenTelemetry's own records, which would otherwise loop back through the OTLP sink.
    """

    def emit(self, record: logging.LogRecord) -> None:
        if record.name.startswith("opentelemetry"):
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk back to the frame that issued the logging call
        frame: FrameType | None = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _add_otlp_sink(endpoint: str, level: str) -> None:
    settings = get_settings()
    resource = Resource.create(
        {
            "service.name": os.getenv("OTEL_SERVICE_NAME", "volunteer-signups"),
            "deployment.environment": settings.ENVIRONMENT,
        }
    )
    logger_provider = LoggerProvider(resource=resource)
    set_logger_provider(logger_provider)

    insecure = os.getenv("OTEL_EXPORTER_OTLP_INSECURE", "false").lower() == "true"
    exporter = OTLPLogExporter(endpoint=endpoint, insecure=insecure)
    logger_provider.add_log_record_processor(BatchLogRecordProcessor(exporter))

    otel_handler = LoggingHandler(
        level=logging.getLevelName(level), logger_provider=logger_provider
    )
    logger.add(otel_handler, level=level, serialize=True)


def setup_logging():
    """
    Route every log record through loguru.

    Standard-library loggers (root, uvicorn, gunicorn, fastapi, SQLAlchemy) lose their
    own handlers and forward to loguru; loguru writes to stderr and, when
    OTEL_EXPORTER_OTLP_ENDPOINT is set, to the OTLP collector as well.

    Returns:
        The configured loguru logger.
    """
    level = get_settings().LOG_LEVEL.upper()

    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(level)

    for name in HIJACKED_LOGGERS:
        log = logging.getLogger(name)
        log.handlers = []
        log.propagate = False
        log.addHandler(InterceptHandler())

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> <level>{level}</level>: <cyan>[{name}:{line}]</cyan> - <level>{message}</level>",
        colorize=True,
        enqueue=True,
    )

    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        try:
            _add_otlp_sink(endpoint, level)
            logger.info("Logging (Loguru Sink) Active.")
        except Exception as e:
            # A broken collector must not stop the API from starting
            print(f"Log Setup Failed: {e}", file=sys.stderr)

    return logger
