import logging
import sys

# Library loggers that log per request or per PDF object at INFO/DEBUG.
_NOISY_LOGGERS = ("pdfminer", "httpx", "httpcore", "openai")


class Log:
    """Process-wide logging facade for the worker threads.

    Records go to stderr so stdout stays free for the CLI's JSON output.
    Callers log job ids and counts, never document text.
    """

    _logger: logging.Logger = logging.getLogger("medreport")

    @classmethod
    def configure(cls, log_level: str) -> None:
        level = log_level.upper()
        cls._logger.setLevel(level)
        cls._logger.propagate = False
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(threadName)s %(message)s")
            )
            cls._logger.addHandler(handler)
        if level != "DEBUG":
            for name in _NOISY_LOGGERS:
                logging.getLogger(name).setLevel(logging.WARNING)

    @classmethod
    def debug(cls, message: str) -> None:
        cls._logger.debug(message)

    @classmethod
    def info(cls, message: str) -> None:
        cls._logger.info(message)

    @classmethod
    def warning(cls, message: str) -> None:
        cls._logger.warning(message)

    @classmethod
    def error(cls, message: str) -> None:
        cls._logger.error(message)

    @classmethod
    def exception(cls, message: str) -> None:
        """Log at ERROR with the traceback of the exception being handled."""
        cls._logger.exception(message)
