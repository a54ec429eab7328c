"""Record managers: create/update/delete over the state collections."""

from finhealth.managers.records import (
    AssetManager,
    EditableRecordManager,
    LiabilityManager,
    RecordManager,
    RecordValidationError,
    TransactionManager,
)

__all__ = [
    "AssetManager",
    "EditableRecordManager",
    "LiabilityManager",
    "RecordManager",
    "RecordValidationError",
    "TransactionManager",
]
