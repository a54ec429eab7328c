"""Derived financial figures."""

from finhealth.analytics.metrics import (
    AllocationSlice,
    CashFlowRow,
    FinancialSummary,
    asset_allocation,
    asset_monthly_income,
    asset_roi,
    cash_flow_overview,
    income_composition,
    monthly_active_income,
    monthly_balance,
    monthly_expenses,
    monthly_installments,
    monthly_passive_income,
    net_worth,
    share,
    summarize,
    total_assets,
    total_liabilities,
)

__all__ = [
    "AllocationSlice",
    "CashFlowRow",
    "FinancialSummary",
    "asset_allocation",
    "asset_monthly_income",
    "asset_roi",
    "cash_flow_overview",
    "income_composition",
    "monthly_active_income",
    "monthly_balance",
    "monthly_expenses",
    "monthly_installments",
    "monthly_passive_income",
    "net_worth",
    "share",
    "summarize",
    "total_assets",
    "total_liabilities",
]
