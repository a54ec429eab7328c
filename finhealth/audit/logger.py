"""
Audit Logger

Every state change and advisor call is logged as a structured event.
This gives:
1. Traceability of what the user changed and when
2. Debugging information when storage or the advisor fails

The audit logger never raises: a logging problem must not break
the action being logged.
"""

import logging
from typing import Optional

import structlog

from finhealth.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route stdlib logging (and therefore structlog) to stderr at `level`.

    Safe to call more than once; only the level changes after the first call.
    """
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)


_SEVERITY_METHODS = {
    AuditSeverity.DEBUG: "debug",
    AuditSeverity.INFO: "info",
    AuditSeverity.WARNING: "warning",
    AuditSeverity.ERROR: "error",
    AuditSeverity.CRITICAL: "critical",
}


class AuditLogger:
    """Central audit logging service."""

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("finhealth.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event at its own severity.

        Returns False if the log call itself failed.
        """
        method = getattr(self._logger, _SEVERITY_METHODS[event.severity])
        try:
            method("audit_event", **event.to_log_dict())
        except Exception:
            logging.getLogger(__name__).exception(
                "Failed to write audit event %s", event.event_id
            )
            return False
        return True

    def log_record_created(self, entity_type: str, entity_id: str, label: str) -> None:
        self.log(AuditEventBuilder.record_created(entity_type, entity_id, label))

    def log_record_updated(self, entity_type: str, entity_id: str, label: str) -> None:
        self.log(AuditEventBuilder.record_updated(entity_type, entity_id, label))

    def log_record_deleted(self, entity_type: str, entity_id: str) -> None:
        self.log(AuditEventBuilder.record_deleted(entity_type, entity_id))

    def log_record_not_found(self, entity_type: str, entity_id: str, operation: str) -> None:
        self.log(AuditEventBuilder.record_not_found(entity_type, entity_id, operation))

    def log_state_loaded(self, counts: dict[str, int]) -> None:
        self.log(AuditEventBuilder.state_loaded(counts))

    def log_state_default_used(self, reason: str, error_message: Optional[str] = None) -> None:
        self.log(AuditEventBuilder.state_default_used(reason, error_message))

    def log_state_saved(self, key: str, size: int) -> None:
        self.log(AuditEventBuilder.state_saved(key, size))

    def log_state_save_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.state_save_failed(key, error_message))

    def log_state_reset(self, key: str) -> None:
        self.log(AuditEventBuilder.state_reset(key))

    def log_advisor_requested(self, request_id: int, has_question: bool) -> None:
        self.log(AuditEventBuilder.advisor_requested(request_id, has_question))

    def log_advisor_responded(self, request_id: int, length: int) -> None:
        self.log(AuditEventBuilder.advisor_responded(request_id, length))

    def log_advisor_not_configured(self) -> None:
        self.log(AuditEventBuilder.advisor_not_configured())

    def log_advisor_result_discarded(self, request_id: int, latest_id: int) -> None:
        self.log(AuditEventBuilder.advisor_result_discarded(request_id, latest_id))

    def log_external_service_error(self, service: str, error_message: str) -> None:
        self.log(AuditEventBuilder.external_service_error(service, error_message))
