# 📄 File: gardenhub/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# Sets up the garden app's activity log so every line says which request and which member
# it belongs to, and records who moved, created or deleted what on the boards.

# 🧪 Purpose (Technical Summary):
# Root logger configuration with python-json-logger (or plain text), request/user ids carried
# in context variables and stamped on records by a filter, and a LoggerAdapter with
# audit helpers for user actions and business events.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging, contextvars: standard library plumbing

# 🔄 Connected Modules / Calls From:
# Used by: gardenhub.main (startup/shutdown), request logging middleware, feature services,
# gardenhub.shared.core.dependencies (bind_user)

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pythonjsonlogger import jsonlogger

from gardenhub.shared.config.settings import get_settings

request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')

SERVICE_NAME = 'gardenhub-api'
TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s'
JSON_FIELDS = '%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s %(user_id)s %(service)s'
QUIET_LOGGERS = ('httpx', 'aiohttp', 'asyncio', 'hpack', 'websockets')

_configured = False


class ContextFilter(logging.Filter):
    """Stamps request id, user id and service on each record and unpacks extra_fields."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.user_id = user_id_var.get()
        record.service = SERVICE_NAME
        for key, value in getattr(record, 'extra_fields', {}).items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class JSONFormatter(jsonlogger.JsonFormatter):

    def __init__(self):
        super().__init__(
            JSON_FIELDS,
            rename_fields={'asctime': 'timestamp', 'levelname': 'level', 'name': 'logger'},
        )

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record.pop('extra_fields', None)
        for key in ('request_id', 'user_id'):
            if not log_record.get(key):
                log_record.pop(key, None)


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger whose ``extra`` dict is nested under ``extra_fields``.

    Keys such as ``message`` or ``args`` would otherwise collide with
    LogRecord attributes; ContextFilter copies the safe ones back.
    """

    def __init__(self, name: str):
        super().__init__(logging.getLogger(name), {})

    def process(self, msg, kwargs):
        fields = kwargs.pop('extra', None)
        if fields:
            kwargs['extra'] = {'extra_fields': dict(fields)}
        return msg, kwargs

    def log_user_action(
        self,
        action: str,
        user_id: str,
        resource: Optional[str] = None,
        result: str = 'success',
        extra: Optional[Dict[str, Any]] = None
    ) -> None:
        """Audit trail entry: who did what to which row."""
        fields = {'event_type': 'user_action', 'action': action, 'acting_user': user_id, 'result': result}
        fields.update(extra or {})
        message = f"User {user_id} performed {action}"
        if resource:
            fields['resource'] = resource
            message += f" on {resource}"
        if result != 'success':
            message += f" ({result})"
        self.info(message, extra=fields)

    def log_business_event(
        self,
        event_type: str,
        description: str,
        entity_id: Optional[str] = None,
        entity_type: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None
    ) -> None:
        fields = {'event_type': 'business_event', 'business_event_type': event_type}
        fields.update({k: v for k, v in (('entity_id', entity_id), ('entity_type', entity_type)) if v})
        fields.update(extra or {})
        self.info(description, extra=fields)


def _build_handlers(log_file: Optional[str], enable_console: bool) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if enable_console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    return handlers


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[str] = None,
    enable_console: bool = True
) -> logging.Logger:
    """
    Configure the root logger once per process.

    Arguments default to LOG_LEVEL, LOG_FORMAT and LOG_FILE from settings.
    """
    global _configured
    if _configured:
        return logging.getLogger('startup')

    settings = get_settings()
    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)
    if (log_format or settings.LOG_FORMAT).lower() == 'json':
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    context_filter = ContextFilter()
    for handler in _build_handlers(log_file or settings.LOG_FILE, enable_console):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
    return logging.getLogger('startup')


@lru_cache(maxsize=None)
def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)


@contextmanager
def log_context(request_id: Optional[str] = None, user_id: Optional[str] = None):
    """Bind request and user ids to every record logged inside the block."""
    request_id = request_id or str(uuid4())
    request_token = request_id_var.set(request_id)
    user_token = user_id_var.set(user_id or '')
    try:
        yield {'request_id': request_id, 'user_id': user_id}
    finally:
        request_id_var.reset(request_token)
        user_id_var.reset(user_token)


def bind_user(user_id: str) -> None:
    """Attach the authenticated user to the current request's log context."""
    user_id_var.set(user_id or '')


def _log_lifecycle(phase: str, service_name: str, fields: Dict[str, Any]) -> None:
    get_logger(phase).info(
        f"Service {service_name} {'starting up' if phase == 'startup' else 'shutting down'}",
        extra={'event_type': f'service_{phase}', 'service_name': service_name, **fields},
    )


def log_startup_event(service_name: str, version: str, extra: Optional[Dict[str, Any]] = None) -> None:
    _log_lifecycle('startup', service_name, {'version': version, **(extra or {})})


def log_shutdown_event(service_name: str, extra: Optional[Dict[str, Any]] = None) -> None:
    _log_lifecycle('shutdown', service_name, extra or {})
