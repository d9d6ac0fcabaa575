"""Audit event sink backed by the standard logging module.

Every audit record goes to the ``bookbuddy.audit`` logger. The structured
fields are attached under ``record.audit`` so handlers can ship them as
JSON, and are also rendered into the message for plain console output.
"""

import logging
from typing import Any
from uuid import UUID

from bookbuddy_identity.application.context import RequestContext

AUDIT_LOGGER_NAME = "bookbuddy.audit"


class AuditLogger:
    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(AUDIT_LOGGER_NAME)

    def info(
        self,
        event: str,
        context: RequestContext | None = None,
        user_id: UUID | None = None,
        **data: Any,
    ) -> None:
        self._emit(logging.INFO, event, context, user_id, data)

    def warn(
        self,
        event: str,
        context: RequestContext | None = None,
        user_id: UUID | None = None,
        **data: Any,
    ) -> None:
        self._emit(logging.WARNING, event, context, user_id, data)

    def error(
        self,
        event: str,
        context: RequestContext | None = None,
        user_id: UUID | None = None,
        **data: Any,
    ) -> None:
        self._emit(logging.ERROR, event, context, user_id, data)

    def _emit(
        self,
        level: int,
        event: str,
        context: RequestContext | None,
        user_id: UUID | None,
        data: dict[str, Any],
    ) -> None:
        fields: dict[str, Any] = {
            "event": event,
            **(context or RequestContext.empty()).as_log_fields(),
            "user_id": str(user_id) if user_id else None,
            **data,
        }
        rendered = " ".join(
            f"{key}={value}" for key, value in fields.items() if value is not None
        )
        self._logger.log(level, "%s", rendered, extra={"audit": fields})
