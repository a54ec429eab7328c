"""
Core Data Models for FinHealth

These models define the three record kinds (assets, liabilities and
transactions) and the aggregate root that holds them.

DESIGN DECISION: Enum values ARE the Portuguese display labels
("Investimento", "Ativa", ...). They double as the storage representation,
so existing saved data must keep round-tripping through these exact strings.

Python attributes are snake_case; the persisted JSON uses the camelCase
aliases (currentValue, isPaid, ...). Always dump with by_alias=True.

No range checks are applied to amounts, rates or counts. The forms keep
obviously bad input out; everything else is accepted as entered.
Stored text is kept exactly as saved; trimming happens at form input.
"""

from datetime import date
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def new_record_id() -> str:
    """Fresh opaque identifier for a record."""
    return str(uuid4())


# =============================================================================
# ENUMS - stored as their display labels
# =============================================================================

class AssetType(str, Enum):
    """Kind of holding."""
    CASH = "Dinheiro"
    REAL_ESTATE = "Imóvel"
    VEHICLE = "Veículo"
    INVESTMENT = "Investimento"
    CRYPTO = "Criptomoeda"
    OTHER = "Outros"


class Liquidity(str, Enum):
    """How quickly an asset can be turned into cash."""
    HIGH = "Alta"
    MEDIUM = "Média"
    LOW = "Baixa"


class LiabilityType(str, Enum):
    """Kind of debt."""
    CREDIT_CARD = "Cartão de Crédito"
    LOAN = "Empréstimo"
    FINANCING = "Financiamento"
    INSTALLMENT = "Parcelamento"
    OTHER = "Outros"


class LiabilityStatus(str, Enum):
    """
    Debt status.

    Only ACTIVE debts count towards the monthly installment burden.
    """
    ACTIVE = "Ativa"
    PAID = "Quitada"
    LATE = "Atrasada"


class TransactionType(str, Enum):
    """Direction of a cash-flow entry."""
    INCOME = "Receita"
    EXPENSE = "Despesa"


class Recurrence(str, Enum):
    """Repetition pattern of a transaction. Informational only."""
    FIXED = "Fixa"
    VARIABLE = "Variável"
    EVENTUAL = "Eventual"


# =============================================================================
# RECORDS
# =============================================================================

class _Record(BaseModel):
    """Shared configuration: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(
        default_factory=new_record_id,
        description="Unique identifier within its collection"
    )


class Asset(_Record):
    """
    A holding with a current market value.

    monthly_yield is a percentage (0-100 expected) used to project
    passive income. A missing yield counts as zero.
    """

    name: str = Field(
        ...,
        description="Asset name"
    )
    type: AssetType = Field(
        ...,
        description="Asset type"
    )
    current_value: float = Field(
        ...,
        description="Current market value"
    )
    acquisition_value: float = Field(
        ...,
        description="Value paid at acquisition"
    )
    acquisition_date: date = Field(
        ...,
        description="Acquisition date"
    )
    liquidity: Liquidity = Field(
        ...,
        description="Liquidity class"
    )
    monthly_yield: Optional[float] = Field(
        default=None,
        description="Monthly yield in percent"
    )


class Liability(_Record):
    """
    A debt obligation.

    total_value is the REMAINING balance owed, not the original principal.
    """

    name: str = Field(
        ...,
        description="Debt description"
    )
    type: LiabilityType = Field(
        ...,
        description="Debt type"
    )
    total_value: float = Field(
        ...,
        description="Remaining balance owed"
    )
    # Optional on the form, so older saves may hold null for these two
    interest_rate: Optional[float] = Field(
        default=None,
        description="Interest rate in percent per month"
    )
    installments_count: Optional[int] = Field(
        default=None,
        description="Remaining number of installments"
    )
    installment_value: float = Field(
        ...,
        description="Periodic payment amount"
    )
    start_date: date = Field(
        ...,
        description="Start date"
    )
    status: LiabilityStatus = Field(
        default=LiabilityStatus.ACTIVE,
        description="Debt status"
    )


class Transaction(_Record):
    """
    A manually recorded income or expense.

    The sign of amount is implied by type. is_paid is always False
    at creation and nothing in the app toggles it.
    """

    description: str = Field(
        ...,
        description="What the entry is"
    )
    type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    category: str = Field(
        ...,
        description="Free-text category label"
    )
    amount: float = Field(
        ...,
        description="Amount, sign implied by type"
    )
    recurrence: Recurrence = Field(
        ...,
        description="Repetition pattern (informational)"
    )
    # Stored as "date"; renamed in Python so it does not shadow datetime.date
    entry_date: date = Field(
        ...,
        alias="date",
        description="Entry date"
    )
    is_paid: bool = Field(
        default=False,
        description="Payment flag"
    )


# =============================================================================
# AGGREGATE ROOT
# =============================================================================

class FinancialState(BaseModel):
    """
    The whole application state.

    This is both the unit of persistence and the unit of mutation:
    changes replace a whole collection, never a record in place.
    """

    model_config = ConfigDict(populate_by_name=True)

    assets: list[Asset] = Field(default_factory=list)
    liabilities: list[Liability] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)

    def to_storage_dict(self) -> dict:
        """
        Convert to the persisted JSON layout.

        camelCase keys, enum labels, ISO dates. An unset monthlyYield is
        omitted rather than written as null.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_storage_dict(cls, data: dict) -> "FinancialState":
        """Parse the persisted JSON layout. Raises pydantic.ValidationError."""
        return cls.model_validate(data)
