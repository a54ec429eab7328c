"""Tests for the derived financial figures."""

from datetime import date

import pytest

from finhealth.analytics import (
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
from finhealth.services.storage import default_state


def asset(type=AssetType.INVESTMENT, current=1000.0, acquired=800.0, monthly_yield=None) -> Asset:
    return Asset(
        name="Ativo",
        type=type,
        current_value=current,
        acquisition_value=acquired,
        acquisition_date=date(2024, 1, 1),
        liquidity=Liquidity.MEDIUM,
        monthly_yield=monthly_yield,
    )


def debt(total=1000.0, installment=100.0, status=LiabilityStatus.ACTIVE) -> Liability:
    return Liability(
        name="Dívida",
        type=LiabilityType.LOAN,
        total_value=total,
        interest_rate=2.0,
        installments_count=10,
        installment_value=installment,
        start_date=date(2024, 1, 1),
        status=status,
    )


def entry(type: TransactionType, amount: float) -> Transaction:
    return Transaction(
        description="Lançamento",
        type=type,
        category="Geral",
        amount=amount,
        recurrence=Recurrence.EVENTUAL,
        entry_date=date(2024, 1, 1),
    )


class TestShare:
    """Tests for the zero-divisor helper."""

    def test_share(self):
        """Test a plain percentage."""
        assert share(25, 200) == pytest.approx(12.5)

    def test_share_of_zero_whole(self):
        """Test that a zero divisor gives 0."""
        assert share(10, 0) == 0


class TestAssetFigures:
    """Tests for per-asset ROI and income."""

    def test_roi(self):
        """Test ROI of an asset bought for 800 and worth 1000."""
        assert asset_roi(asset(current=1000, acquired=800)) == pytest.approx(25.0)

    def test_negative_roi(self):
        """Test ROI of an asset that lost value."""
        assert asset_roi(asset(current=600, acquired=800)) == pytest.approx(-25.0)

    def test_roi_with_zero_acquisition(self):
        """Test that a zero acquisition value gives ROI 0."""
        assert asset_roi(asset(current=1000, acquired=0)) == 0

    def test_monthly_income(self):
        """Test yield-derived income."""
        assert asset_monthly_income(asset(current=28000, monthly_yield=1.85)) == pytest.approx(518.0)

    def test_missing_yield_counts_as_zero(self):
        """Test an asset with no yield."""
        assert asset_monthly_income(asset(monthly_yield=None)) == 0


class TestTotals:
    """Tests for the collection totals."""

    def test_empty_collections(self):
        """Test that every total of nothing is 0."""
        assert total_assets([]) == 0
        assert total_liabilities([]) == 0
        assert net_worth([], []) == 0
        assert monthly_passive_income([]) == 0
        assert monthly_installments([]) == 0

    def test_net_worth(self):
        """Test net worth is assets minus liabilities."""
        assets = [asset(current=500), asset(current=1500)]
        liabilities = [debt(total=300), debt(total=1200, status=LiabilityStatus.PAID)]
        assert net_worth(assets, liabilities) == pytest.approx(500)

    def test_total_liabilities_ignores_status(self):
        """Test that paid and late debts still count in the total."""
        liabilities = [
            debt(total=100),
            debt(total=200, status=LiabilityStatus.PAID),
            debt(total=300, status=LiabilityStatus.LATE),
        ]
        assert total_liabilities(liabilities) == pytest.approx(600)

    def test_installments_only_count_active_debts(self):
        """Test the installment burden."""
        liabilities = [
            debt(installment=100),
            debt(installment=200, status=LiabilityStatus.PAID),
            debt(installment=400, status=LiabilityStatus.LATE),
            debt(installment=50),
        ]
        assert monthly_installments(liabilities) == pytest.approx(150)

    def test_passive_income_over_every_asset(self):
        """Test that passive income covers all types and liquidities."""
        assets = [
            asset(type=AssetType.CASH, current=1000, monthly_yield=1),
            asset(type=AssetType.VEHICLE, current=2000, monthly_yield=0.5),
            asset(type=AssetType.OTHER, current=5000),
        ]
        assert monthly_passive_income(assets) == pytest.approx(20)

    def test_income_and_expenses(self):
        """Test that transactions are split by type, ignoring dates."""
        transactions = [
            entry(TransactionType.INCOME, 4000),
            entry(TransactionType.INCOME, 500),
            entry(TransactionType.EXPENSE, 1200),
        ]
        assert monthly_active_income(transactions) == pytest.approx(4500)
        assert monthly_expenses(transactions) == pytest.approx(1200)

    def test_monthly_balance(self):
        """Test income minus expenses and active installments."""
        state = FinancialState(
            assets=[asset(current=10000, monthly_yield=1)],
            liabilities=[debt(installment=300), debt(installment=999, status=LiabilityStatus.PAID)],
            transactions=[entry(TransactionType.INCOME, 2000), entry(TransactionType.EXPENSE, 700)],
        )
        assert monthly_balance(state) == pytest.approx(2000 + 100 - 700 - 300)


class TestAllocation:
    """Tests for the per-type breakdown."""

    def test_allocation_groups_by_type_in_first_seen_order(self):
        """Test two investments and one cash holding."""
        slices = asset_allocation([
            asset(type=AssetType.INVESTMENT, current=100),
            asset(type=AssetType.CASH, current=50),
            asset(type=AssetType.INVESTMENT, current=200),
        ])
        assert [(s.type, s.value) for s in slices] == [
            (AssetType.INVESTMENT, 300),
            (AssetType.CASH, 50),
        ]

    def test_allocation_of_nothing(self):
        """Test that no assets give no slices."""
        assert asset_allocation([]) == []

    def test_income_composition(self):
        """Test active/passive percentages."""
        active, passive = income_composition(3000, 1000)
        assert active == pytest.approx(75)
        assert passive == pytest.approx(25)

    def test_income_composition_without_income(self):
        """Test that no income gives 0 / 0."""
        assert income_composition(0, 0) == (0, 0)


class TestSummary:
    """Tests for the dashboard summary over the seed state."""

    def test_seed_summary(self):
        """Test every figure of the default state."""
        summary = summarize(default_state())

        assert summary.total_assets == pytest.approx(248000)
        assert summary.total_liabilities == pytest.approx(175986)
        assert summary.net_worth == pytest.approx(72014)
        assert summary.monthly_active_income == pytest.approx(4000)
        assert summary.monthly_passive_income == pytest.approx(1618)
        assert summary.monthly_installments == pytest.approx(1012)
        assert summary.monthly_expenses == 0
        assert summary.monthly_balance == pytest.approx(4000 + 1618 - 1012)
        assert summary.asset_count == 2
        assert summary.liability_count == 1

    def test_summary_of_empty_state(self):
        """Test that an empty state gives zeros everywhere."""
        summary = summarize(FinancialState())
        assert summary.net_worth == 0
        assert summary.active_income_share == 0
        assert summary.passive_income_share == 0

    def test_cash_flow_overview(self):
        """Test the two macro chart rows."""
        rows = cash_flow_overview(summarize(default_state()))

        assert [r.name for r in rows] == ["Renda Total", "Saídas Totais"]
        assert rows[0].value == pytest.approx(5618)
        assert rows[0].active == pytest.approx(4000)
        assert rows[0].passive == pytest.approx(1618)
        assert rows[1].value == pytest.approx(1012)

    def test_summary_with_missing_rate_and_count(self):
        """Test that debts saved without rate or count still aggregate."""
        loose = Liability(
            name="Empréstimo família",
            type=LiabilityType.LOAN,
            total_value=5000,
            installment_value=500,
            start_date=date(2024, 4, 1),
        )
        summary = summarize(FinancialState(liabilities=[loose]))
        assert summary.total_liabilities == pytest.approx(5000)
        assert summary.monthly_installments == pytest.approx(500)
