"""
Data Models Package

Pydantic models for the financial records and for audit events.
"""

from finhealth.models.finance import (
    Asset,
    AssetType,
    FinancialState,
    Liability,
    LiabilityStatus,
    LiabilityType,
    Liquidity,
    Recurrence,
    Transaction,
    TransactionType,
    new_record_id,
)
from finhealth.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "Asset",
    "AssetType",
    "FinancialState",
    "Liability",
    "LiabilityStatus",
    "LiabilityType",
    "Liquidity",
    "Recurrence",
    "Transaction",
    "TransactionType",
    "new_record_id",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
