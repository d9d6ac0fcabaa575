from bookbuddy_identity.infrastructure.audit.audit_logger import (
    AUDIT_LOGGER_NAME,
    AuditLogger,
)

__all__ = ["AUDIT_LOGGER_NAME", "AuditLogger"]
