"""
Financial Metrics

Pure functions that derive summary figures from the record collections.
Nothing here mutates its input or touches storage; every figure is
recomputed from scratch each time a view renders.

ZERO-DIVISOR POLICY: every ratio in this module returns 0 when its
divisor is 0. That is not an accounting convention, it is what the
views expect to display.

All monthly figures are ESTIMATES: every recorded transaction is treated
as one month's worth of cash flow, whatever its date or recurrence.
"""

from collections.abc import Iterable

from pydantic import BaseModel, Field

from finhealth.models.finance import (
    Asset,
    AssetType,
    FinancialState,
    Liability,
    LiabilityStatus,
    Transaction,
    TransactionType,
)


def share(part: float, whole: float) -> float:
    """part as a percentage of whole; 0 when whole is 0."""
    if whole == 0:
        return 0.0
    return part / whole * 100


# =============================================================================
# PER-RECORD FIGURES
# =============================================================================

def asset_roi(asset: Asset) -> float:
    """Total return since acquisition, in percent."""
    if asset.acquisition_value == 0:
        return 0.0
    return (asset.current_value - asset.acquisition_value) / asset.acquisition_value * 100


def asset_monthly_income(asset: Asset) -> float:
    """Projected passive income from the asset's monthly yield."""
    return asset.current_value * ((asset.monthly_yield or 0) / 100)


# =============================================================================
# COLLECTION TOTALS
# =============================================================================

def total_assets(assets: Iterable[Asset]) -> float:
    return sum((a.current_value for a in assets), 0.0)


def total_liabilities(liabilities: Iterable[Liability]) -> float:
    """Sum of REMAINING balances, whatever the status."""
    return sum((debt.total_value for debt in liabilities), 0.0)


def net_worth(assets: Iterable[Asset], liabilities: Iterable[Liability]) -> float:
    return total_assets(assets) - total_liabilities(liabilities)


def monthly_active_income(transactions: Iterable[Transaction]) -> float:
    return sum(
        (t.amount for t in transactions if t.type == TransactionType.INCOME),
        0.0,
    )


def monthly_passive_income(assets: Iterable[Asset]) -> float:
    """Yield-derived income over every asset, regardless of type or liquidity."""
    return sum((asset_monthly_income(a) for a in assets), 0.0)


def monthly_expenses(transactions: Iterable[Transaction]) -> float:
    return sum(
        (t.amount for t in transactions if t.type == TransactionType.EXPENSE),
        0.0,
    )


def monthly_installments(liabilities: Iterable[Liability]) -> float:
    """Installment burden. Paid-off and late debts do not count."""
    return sum(
        (debt.installment_value for debt in liabilities if debt.status == LiabilityStatus.ACTIVE),
        0.0,
    )


def monthly_balance(state: FinancialState) -> float:
    """(active + passive income) - (expenses + installments)."""
    income = monthly_active_income(state.transactions) + monthly_passive_income(state.assets)
    outflow = monthly_expenses(state.transactions) + monthly_installments(state.liabilities)
    return income - outflow


# =============================================================================
# BREAKDOWNS
# =============================================================================

class AllocationSlice(BaseModel):
    """Current value held in one asset type."""

    type: AssetType
    value: float


def asset_allocation(assets: Iterable[Asset]) -> list[AllocationSlice]:
    """
    Current value summed per asset type.

    Types appear in the order they are first seen, not sorted.
    """
    totals: dict[AssetType, float] = {}
    for asset in assets:
        totals[asset.type] = totals.get(asset.type, 0.0) + asset.current_value
    return [AllocationSlice(type=t, value=v) for t, v in totals.items()]


def income_composition(active: float, passive: float) -> tuple[float, float]:
    """(active %, passive %) of total income, both 0 when there is no income."""
    total = active + passive
    return share(active, total), share(passive, total)


class CashFlowRow(BaseModel):
    """One bar of the monthly cash-flow chart."""

    name: str
    value: float
    active: float = 0.0
    passive: float = 0.0


# =============================================================================
# SUMMARY
# =============================================================================

class FinancialSummary(BaseModel):
    """Every dashboard figure, computed in one pass over the state."""

    total_assets: float
    total_liabilities: float
    net_worth: float

    monthly_active_income: float
    monthly_passive_income: float
    monthly_expenses: float
    monthly_installments: float

    asset_count: int = Field(ge=0)
    liability_count: int = Field(ge=0)

    @property
    def monthly_income(self) -> float:
        return self.monthly_active_income + self.monthly_passive_income

    @property
    def monthly_outflow(self) -> float:
        return self.monthly_expenses + self.monthly_installments

    @property
    def monthly_balance(self) -> float:
        return self.monthly_income - self.monthly_outflow

    @property
    def active_income_share(self) -> float:
        return income_composition(self.monthly_active_income, self.monthly_passive_income)[0]

    @property
    def passive_income_share(self) -> float:
        return income_composition(self.monthly_active_income, self.monthly_passive_income)[1]


def summarize(state: FinancialState) -> FinancialSummary:
    """Compute the dashboard figures for a state."""
    assets_total = total_assets(state.assets)
    liabilities_total = total_liabilities(state.liabilities)
    return FinancialSummary(
        total_assets=assets_total,
        total_liabilities=liabilities_total,
        net_worth=assets_total - liabilities_total,
        monthly_active_income=monthly_active_income(state.transactions),
        monthly_passive_income=monthly_passive_income(state.assets),
        monthly_expenses=monthly_expenses(state.transactions),
        monthly_installments=monthly_installments(state.liabilities),
        asset_count=len(state.assets),
        liability_count=len(state.liabilities),
    )


def cash_flow_overview(summary: FinancialSummary) -> list[CashFlowRow]:
    """Rows for the macro income vs. outflow chart."""
    return [
        CashFlowRow(
            name="Renda Total",
            value=summary.monthly_income,
            active=summary.monthly_active_income,
            passive=summary.monthly_passive_income,
        ),
        CashFlowRow(
            name="Saídas Totais",
            value=summary.monthly_outflow,
        ),
    ]
