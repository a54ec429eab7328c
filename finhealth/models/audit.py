"""
Audit Models for FinHealth

Every state change and every advisor call produces an AuditEvent.
Events are written to the local structured log; they are not persisted
with the financial state.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Record changes
    RECORD_CREATED = "record_created"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    RECORD_NOT_FOUND = "record_not_found"

    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_DEFAULT_USED = "state_default_used"
    STATE_SAVED = "state_saved"
    STATE_SAVE_FAILED = "state_save_failed"
    STATE_RESET = "state_reset"

    # Advisor
    ADVISOR_REQUESTED = "advisor_requested"
    ADVISOR_RESPONDED = "advisor_responded"
    ADVISOR_NOT_CONFIGURED = "advisor_not_configured"
    ADVISOR_RESULT_DISCARDED = "advisor_result_discarded"

    # System events
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Record ids are opaque strings, not UUIDs (seed data uses "1", "2")
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'asset', 'liability', 'state')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_created("asset", asset.id, asset.name)
        event = AuditEventBuilder.state_save_failed(str(exc))
    """

    @staticmethod
    def record_created(entity_type: str, entity_id: str, label: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} created: {label[:200]}",
            details={"label": label},
            is_user_action=True,
        )

    @staticmethod
    def record_updated(entity_type: str, entity_id: str, label: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} updated: {label[:200]}",
            details={"label": label},
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(entity_type: str, entity_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} deleted",
            is_user_action=True,
        )

    @staticmethod
    def record_not_found(entity_type: str, entity_id: str, operation: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{operation.capitalize()} ignored: no {entity_type} with this id",
            details={"operation": operation},
            is_user_action=True,
        )

    @staticmethod
    def state_loaded(counts: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            entity_type="state",
            description="Financial state loaded from storage",
            details=counts,
        )

    @staticmethod
    def state_default_used(reason: str, error_message: Optional[str] = None) -> AuditEvent:
        # A missing slot is normal on first run; a broken one is not
        severity = AuditSeverity.ERROR if error_message else AuditSeverity.INFO
        return AuditEvent(
            event_type=AuditEventType.STATE_DEFAULT_USED,
            severity=severity,
            entity_type="state",
            description=f"Default state used: {reason}",
            error_message=error_message,
        )

    @staticmethod
    def state_saved(key: str, size: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="state",
            description="Financial state saved",
            details={"key": key, "size_bytes": size},
        )

    @staticmethod
    def state_save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="state",
            description="Failed to save financial state",
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def state_reset(key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_RESET,
            severity=AuditSeverity.WARNING,
            entity_type="state",
            description="Stored financial state cleared",
            details={"key": key},
            is_user_action=True,
        )

    @staticmethod
    def advisor_requested(request_id: int, has_question: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVISOR_REQUESTED,
            entity_type="advisor",
            entity_id=str(request_id),
            description="Advisor analysis requested",
            details={"custom_question": has_question},
            is_user_action=True,
        )

    @staticmethod
    def advisor_responded(request_id: int, length: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVISOR_RESPONDED,
            entity_type="advisor",
            entity_id=str(request_id),
            description="Advisor answer received",
            details={"response_chars": length},
        )

    @staticmethod
    def advisor_not_configured() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVISOR_NOT_CONFIGURED,
            severity=AuditSeverity.WARNING,
            entity_type="advisor",
            description="Advisor called without an API key",
        )

    @staticmethod
    def advisor_result_discarded(request_id: int, latest_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVISOR_RESULT_DISCARDED,
            severity=AuditSeverity.DEBUG,
            entity_type="advisor",
            entity_id=str(request_id),
            description="Stale advisor answer discarded",
            details={"latest_request_id": latest_id},
        )

    @staticmethod
    def external_service_error(service: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
        )
