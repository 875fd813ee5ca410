import logging
import sys
import json

class JsonFormatter(logging.Formatter):
    """
    One JSON object per line, so request and webhook failures can be read
    straight out of the container or Lambda log stream.

    The logger name is kept so webhook, checkout and mail messages can be told
    apart; tracebacks from the email worker land under "exception".
    """
    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record)

def configure_logging(level: str = "INFO") -> None:
    """
    Sends every record to stdout through JsonFormatter at `level` (LOG_LEVEL).

    Called once when the app module is imported. Stripe SDK and urllib3 request
    chatter is kept at WARNING so donation events stay readable.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    # Replace whatever handlers uvicorn or a previous call installed
    if root_logger.handlers:
        root_logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("stripe").setLevel(logging.WARNING)
