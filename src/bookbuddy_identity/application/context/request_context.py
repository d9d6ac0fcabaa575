"""Request context carried into the identity services for auditing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Immutable, transport-independent description of the calling request."""

    request_id: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    @classmethod
    def empty(cls) -> RequestContext:
        return cls()

    def as_log_fields(self) -> dict[str, str | None]:
        return {
            "request_id": self.request_id,
            "ip": self.ip_address,
            "user_agent": self.user_agent,
        }
