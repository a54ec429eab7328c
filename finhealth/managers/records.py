"""
Record Managers

One manager per record kind. A manager owns no data: every operation
takes the current collection and returns a NEW complete collection,
leaving the input untouched. The caller (the app shell) swaps the new
list into the state and persists it.

Validation is form-level only: required fields must be present and
parse into the model's types. Text is trimmed on the way in. Nothing
stops a negative value, a zero installment count or a yield above 100.

CAPABILITIES:
- Assets and liabilities: create, update, delete (delete needs confirmation)
- Transactions: create, delete (no edit, no confirmation)
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Generic, Optional, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from finhealth.models.finance import (
    Asset,
    AssetType,
    Liability,
    LiabilityStatus,
    LiabilityType,
    Liquidity,
    Recurrence,
    Transaction,
    TransactionType,
    new_record_id,
)


logger = structlog.get_logger(__name__)

R = TypeVar("R", bound=BaseModel)


class RecordValidationError(ValueError):
    """Form input is missing required fields or has unparseable values."""

    def __init__(self, entity_type: str, fields: list[str], message: str):
        self.entity_type = entity_type
        self.fields = fields
        super().__init__(message)


class RecordManager(ABC, Generic[R]):
    """
    Create/delete surface shared by every record kind.

    Subclasses set the model, the entity name used in logs and the
    fields a form must fill in.
    """

    model: type[R]
    entity_type: str
    required_fields: tuple[str, ...] = ()
    requires_confirmation: bool = True
    supports_update: bool = False

    @abstractmethod
    def form_defaults(self, today: Optional[date] = None) -> dict[str, Any]:
        """Initial values of an empty form."""
        pass

    def create(self, records: list[R], fields: dict[str, Any]) -> list[R]:
        """
        Append a new record built from form fields.

        A fresh id is always generated; any id in fields is ignored.

        Raises:
            RecordValidationError: If required fields are missing or invalid
        """
        fields = _trimmed(fields)
        self._check_required(fields)
        record = self._build({**fields, "id": new_record_id()})
        return [*records, record]

    def delete(self, records: list[R], record_id: str) -> list[R]:
        """Remove the record with record_id. Unknown ids change nothing."""
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            logger.warning(
                "record_delete_ignored",
                entity_type=self.entity_type,
                record_id=record_id,
            )
        return remaining

    def get(self, records: list[R], record_id: str) -> Optional[R]:
        return next((r for r in records if r.id == record_id), None)

    def to_form(self, record: R) -> dict[str, Any]:
        """Editable fields of an existing record (everything but the id)."""
        return record.model_dump(exclude={"id"})

    def _check_required(self, fields: dict[str, Any]) -> None:
        missing = [
            name for name in self.required_fields
            if fields.get(name) is None
            or (isinstance(fields[name], str) and not fields[name].strip())
        ]
        if missing:
            raise RecordValidationError(
                self.entity_type,
                missing,
                f"Missing required {self.entity_type} fields: {', '.join(missing)}",
            )

    def _build(self, data: dict[str, Any]) -> R:
        try:
            return self.model.model_validate(data)
        except ValidationError as e:
            bad_fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            raise RecordValidationError(
                self.entity_type,
                bad_fields,
                f"Invalid {self.entity_type} fields: {', '.join(bad_fields)}",
            ) from e


class EditableRecordManager(RecordManager[R]):
    """Record manager that also supports edit-in-place."""

    supports_update = True

    def update(self, records: list[R], record_id: str, fields: dict[str, Any]) -> list[R]:
        """
        Replace the record with record_id, keeping its id.

        fields are merged over the existing record, so a partial dict only
        changes what it names. Unknown ids change nothing.

        Raises:
            RecordValidationError: If the merged record does not validate
        """
        existing = self.get(records, record_id)
        if existing is None:
            logger.warning(
                "record_update_ignored",
                entity_type=self.entity_type,
                record_id=record_id,
            )
            return list(records)

        merged = {**existing.model_dump(), **_trimmed(fields), "id": record_id}
        self._check_required(merged)
        updated = self._build(merged)
        return [updated if r.id == record_id else r for r in records]


class AssetManager(EditableRecordManager[Asset]):
    model = Asset
    entity_type = "asset"
    required_fields = (
        "name",
        "type",
        "current_value",
        "acquisition_value",
        "acquisition_date",
        "liquidity",
    )

    def form_defaults(self, today: Optional[date] = None) -> dict[str, Any]:
        return {
            "name": "",
            "type": AssetType.INVESTMENT,
            "current_value": 0.0,
            "acquisition_value": 0.0,
            "acquisition_date": today or date.today(),
            "liquidity": Liquidity.MEDIUM,
            "monthly_yield": 0.0,
        }


class LiabilityManager(EditableRecordManager[Liability]):
    model = Liability
    entity_type = "liability"
    required_fields = (
        "name",
        "type",
        "total_value",
        "installment_value",
        "start_date",
    )

    def form_defaults(self, today: Optional[date] = None) -> dict[str, Any]:
        return {
            "name": "",
            "type": LiabilityType.LOAN,
            "total_value": 0.0,
            "interest_rate": 0.0,
            "installments_count": 1,
            "installment_value": 0.0,
            "start_date": today or date.today(),
            "status": LiabilityStatus.ACTIVE,
        }


class TransactionManager(RecordManager[Transaction]):
    """
    Transactions can only be added and removed.

    Deleting one asks for no confirmation, unlike assets and liabilities.
    """

    model = Transaction
    entity_type = "transaction"
    requires_confirmation = False
    required_fields = (
        "description",
        "type",
        "category",
        "amount",
        "recurrence",
        "entry_date",
    )

    def form_defaults(self, today: Optional[date] = None) -> dict[str, Any]:
        return {
            "description": "",
            "type": TransactionType.EXPENSE,
            "category": "",
            "amount": 0.0,
            "recurrence": Recurrence.VARIABLE,
            "entry_date": today or date.today(),
        }

    def form_after_submit(self, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Form values after a successful add.

        Description, category and amount are cleared. Type, recurrence
        and date keep what was entered.
        """
        defaults = self.form_defaults()
        return {
            **fields,
            "description": defaults["description"],
            "category": defaults["category"],
            "amount": defaults["amount"],
        }

    def create(self, records: list[Transaction], fields: dict[str, Any]) -> list[Transaction]:
        # New entries always start unpaid
        return super().create(records, {**fields, "is_paid": False})


def _trimmed(fields: dict[str, Any]) -> dict[str, Any]:
    """Form text with surrounding whitespace removed. Enum members pass through."""
    return {
        name: value.strip() if type(value) is str else value
        for name, value in fields.items()
    }
