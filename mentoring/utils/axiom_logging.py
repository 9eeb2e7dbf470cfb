"""Axiom 로깅 핸들러 및 로깅 초기화.

Axiom log shipping and logging bootstrap.
Application loggers are plain ``logging`` loggers; when Axiom is configured,
records are additionally shipped to the Axiom dataset as structured events.
Sensitive fields (token, secret, code, authorization) are masked before
leaving the process.
"""

import logging
import queue
import re
from logging.handlers import QueueHandler, QueueListener
from typing import Any

from axiom_py import Client as AxiomClient

from mentoring.config import settings

# 마스킹 대상 필드 패턴 — Fields to mask in structured log payloads
_SENSITIVE_KEYS = re.compile(
    r"(password|secret|token|authorization|api_key|access_token|refresh_token|credential|^code$)",
    re.IGNORECASE,
)

# LogRecord 기본 속성 — Standard LogRecord attributes, excluded from "extra"
_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}


def _mask_dict(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else _mask_dict(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask_dict(item, depth + 1) for item in data[:20]]
    return data


def _truncate(value: Any, max_len: int = 2000) -> Any:
    """로그 크기 제한 — Truncate large values to prevent oversized logs."""
    if isinstance(value, str) and len(value) > max_len:
        return value[:max_len] + "...(truncated)"
    return value


class AxiomLogHandler(logging.Handler):
    """로그 레코드를 Axiom 이벤트로 전송하는 핸들러.

    Logging handler that ingests each record into an Axiom dataset.
    Extra attributes passed via ``logger.info(..., extra={...})`` become
    event fields after masking.
    """

    def __init__(self, client: AxiomClient, dataset: str, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._client = client
        self._dataset = dataset

    def build_event(self, record: logging.LogRecord) -> dict[str, Any]:
        event: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": _truncate(record.getMessage()),
        }
        extra = {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}
        if extra:
            event.update(_mask_dict(extra))
        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
        return event

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._client.ingest_events(self._dataset, [self.build_event(record)])
        except Exception:
            # 로깅 실패가 호출자에 영향주지 않도록 — Never break the caller on log failure
            self.handleError(record)


# Axiom으로 전송할 로거 — Only the application's own loggers are shipped
APP_LOGGER_NAME: str = "mentoring"


def setup_logging(level: str | None = None) -> QueueListener | None:
    """루트 로거를 구성하고, Axiom 설정 시 앱 로거에 Axiom 전송을 연결합니다.

    Configure the root logger from settings. When both AXIOM_API_TOKEN and
    AXIOM_DATASET are set, records of the ``mentoring`` logger tree are put
    on a queue and shipped to Axiom from a listener thread, so logging never
    blocks on the ingest call and the HTTP client's own records are not
    shipped. Safe to call twice.

    Args:
        level: 로그 레벨 이름 (Level name, default: settings.LOG_LEVEL)

    Returns:
        QueueListener | None: 시작된 전송 리스너, 종료 시 stop_logging에 전달
                              (Started listener to pass to stop_logging, or None)
    """
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        root.addHandler(stream)

    if not (settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET):
        return None

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    if any(isinstance(h, QueueHandler) for h in app_logger.handlers):
        return None

    log_queue: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    client = AxiomClient(token=settings.AXIOM_API_TOKEN)
    listener = QueueListener(log_queue, AxiomLogHandler(client, settings.AXIOM_DATASET))
    app_logger.addHandler(QueueHandler(log_queue))
    listener.start()
    return listener


def stop_logging(listener: QueueListener | None) -> None:
    """Axiom 전송을 멈추고 남은 레코드를 모두 보냅니다 — Flush and detach Axiom shipping."""
    if listener is None:
        return
    listener.stop()
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in [h for h in app_logger.handlers if isinstance(h, QueueHandler)]:
        app_logger.removeHandler(handler)
