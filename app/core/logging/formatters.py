"""
JSON formatters for structured logging
"""
import logging
import socket
import json
from datetime import datetime
import pytz
from core.config import settings
from core.request_id_middleware import get_request_id


def _localized(created: float, timezone_name: str) -> datetime:
    tz = pytz.timezone(timezone_name)
    return datetime.fromtimestamp(created, tz=pytz.utc).astimezone(tz)


class EnhancedJSONFormatter(logging.Formatter):
    """
    Унифицированный JSON-форматтер для всех логов.
    Добавляет:
    - timestamp (ISO8601, в LOG_TIMEZONE)
    - event_type (имя логгера)
    - service, hostname
    - request_id, ip, user_agent
    - extra (словарь-сообщение как вложенный объект)
    """

    def __init__(
        self,
        environment: str = settings.ENVIRONMENT,
        include_trace: bool = True,
        timezone: str = settings.LOG_TIMEZONE,
    ):
        super().__init__()
        self.environment = environment
        self.include_trace = include_trace
        self.timezone = timezone

    def format(self, record: logging.LogRecord) -> str:
        dt = _localized(record.created, self.timezone)

        log_data = {
            "timestamp": dt.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event_type": record.name,  # app / system / security
            "environment": self.environment,
            "service": settings.APP_NAME,
            "hostname": socket.gethostname(),
        }

        # Поля берутся из словаря-сообщения, затем из extra=
        message = record.msg if isinstance(record.msg, dict) else {}
        for field in ["event", "request_id", "ip", "user_agent"]:
            value = message.get(field, getattr(record, field, None))
            if value is not None:
                log_data[field] = value

        # request_id текущего запроса, если не передан явно
        if "request_id" not in log_data:
            request_id = get_request_id()
            if request_id:
                log_data["request_id"] = request_id

        log_data["module"] = record.module
        log_data["function"] = record.funcName
        log_data["line"] = record.lineno

        if isinstance(record.msg, dict):
            log_data["extra"] = record.msg
        else:
            log_data["message"] = record.getMessage()

        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else None
            exc_msg = str(record.exc_info[1]) if record.exc_info[1] else None

            log_data["exception"] = {
                "type": exc_type,
                "message": exc_msg,
            }

            if self.include_trace:
                log_data["exception"]["traceback"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class JsonFormatter(logging.Formatter):
    """Компактный JSON для stdout: словарь-сообщение мержится в корень"""

    def __init__(self, timezone: str = settings.LOG_TIMEZONE, datefmt: str = None):
        super().__init__(datefmt=datefmt)
        self.timezone = timezone

    def format(self, record: logging.LogRecord) -> str:
        dt = _localized(record.created, self.timezone)

        log_data = {
            "time": dt.strftime("%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
        }

        if isinstance(record.msg, dict):
            log_data.update(record.msg)
        else:
            log_data["message"] = record.getMessage()

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)

