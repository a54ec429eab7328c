"""
State Repository

Loads and saves the whole FinancialState as one JSON document under a
fixed key.

CONTRACT:
- load() never raises. No saved data, unreadable storage, broken JSON or
  a document that does not match the models all give the default seed
  state (and a log entry).
- save() never raises. A failed write is logged and otherwise ignored;
  the in-memory state stays authoritative.
- save(s) followed by load() gives back a state equal to s.

There is no write-ahead log. A corrupted slot is only "repaired" by
falling back to the default on the next load.
"""

import json
from datetime import date
from typing import Optional

from finhealth.audit import AuditLogger
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
)
from finhealth.services.storage.interface import KeyValueStorage, StorageError


STORAGE_KEY = "finhealth_pro_data_v1"


def default_state(today: Optional[date] = None) -> FinancialState:
    """
    Seed state shown on first run or when saved data is unusable.

    Built fresh on every call so callers can never mutate a shared copy.
    """
    today = today or date.today()
    return FinancialState(
        assets=[
            Asset(
                id="1",
                name="Reserva de Emergência",
                type=AssetType.CASH,
                current_value=28000,
                acquisition_value=10000,
                acquisition_date=date(2023, 1, 15),
                liquidity=Liquidity.HIGH,
                monthly_yield=1.85,
            ),
            Asset(
                id="2",
                name="Apartamento Areal",
                type=AssetType.REAL_ESTATE,
                current_value=220000,
                acquisition_value=190000,
                acquisition_date=date(2025, 7, 20),
                liquidity=Liquidity.LOW,
                monthly_yield=0.5,
            ),
        ],
        liabilities=[
            Liability(
                id="1",
                name="Financiamento apto",
                type=LiabilityType.FINANCING,
                total_value=175986,
                interest_rate=1.5,
                installments_count=408,
                installment_value=1012,
                start_date=date(2022, 8, 10),
                status=LiabilityStatus.ACTIVE,
            ),
        ],
        transactions=[
            Transaction(
                id="1",
                description="Salário Mensal",
                type=TransactionType.INCOME,
                category="Trabalho",
                amount=4000,
                recurrence=Recurrence.FIXED,
                entry_date=today,
                is_paid=True,
            ),
        ],
    )


class StateRepository:
    """Persistence adapter for the single FinancialState document."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._key = key
        self._audit = audit_logger or AuditLogger()

    def load(self) -> FinancialState:
        """Read the stored state, falling back to the default seed state."""
        try:
            raw = self._storage.read(self._key)
        except StorageError as e:
            self._audit.log_state_default_used("storage unreadable", str(e))
            return default_state()

        if raw is None:
            self._audit.log_state_default_used("no saved data")
            return default_state()

        try:
            state = FinancialState.from_storage_dict(json.loads(raw))
        except (ValueError, TypeError) as e:
            # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
            self._audit.log_state_default_used("saved data is corrupt", str(e))
            return default_state()

        self._audit.log_state_loaded({
            "assets": len(state.assets),
            "liabilities": len(state.liabilities),
            "transactions": len(state.transactions),
        })
        return state

    def save(self, state: FinancialState) -> bool:
        """
        Write the full state under the key, replacing the previous value.

        Returns True if the write succeeded. Never raises.
        """
        try:
            payload = json.dumps(state.to_storage_dict(), ensure_ascii=False)
            self._storage.write(self._key, payload)
        except (StorageError, TypeError, ValueError) as e:
            self._audit.log_state_save_failed(self._key, str(e))
            return False

        self._audit.log_state_saved(self._key, len(payload))
        return True

    def reset(self) -> None:
        """Forget the stored state; the next load returns the default."""
        try:
            self._storage.delete(self._key)
        except StorageError as e:
            self._audit.log_state_save_failed(self._key, str(e))
            return
        self._audit.log_state_reset(self._key)
