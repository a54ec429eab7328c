"""Tests for the application shell."""

import asyncio
import json
from datetime import date

import pytest

from finhealth.agents import MISSING_API_KEY_MESSAGE, FinancialAdvisor
from finhealth.config import GeminiSettings, Settings
from finhealth.models.finance import (
    AssetType,
    FinancialState,
    Liquidity,
    Recurrence,
    TransactionType,
)
from finhealth.orchestrator import (
    AdvisorSession,
    FinanceApp,
    ViewState,
    create_app_components,
)
from finhealth.services.storage import (
    STORAGE_KEY,
    InMemoryStorage,
    StateRepository,
    default_state,
)


class GatedAdvisor:
    """Advisor whose answers are released by the test, one gate per call."""

    def __init__(self):
        self.gates = []

    async def analyze(self, state, question=None):
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return f"resposta: {question}"


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def app(storage):
    return FinanceApp(StateRepository(storage))


def saved_state(storage: InMemoryStorage) -> dict:
    return json.loads(storage.read(STORAGE_KEY))


class TestNavigation:
    """Tests for view selection."""

    def test_starts_on_dashboard(self, app):
        """Test the initial view."""
        assert app.view == ViewState.DASHBOARD
        assert app.menu_open is False

    def test_navigate_closes_menu(self, app):
        """Test that choosing a view closes the mobile menu."""
        app.toggle_menu()
        assert app.menu_open is True

        app.navigate(ViewState.ADVISOR)

        assert app.view == ViewState.ADVISOR
        assert app.menu_open is False

    def test_every_view_reachable(self, app):
        """Test navigation between any two views."""
        for source in ViewState:
            for target in ViewState:
                app.navigate(source)
                app.navigate(target)
                assert app.view == target

    def test_navigate_by_value(self, app):
        """Test that the plain value string is accepted."""
        app.navigate("cashflow")
        assert app.view == ViewState.CASHFLOW

    def test_labels(self):
        """Test the Portuguese navigation labels."""
        assert ViewState.DASHBOARD.label == "Visão Geral"
        assert ViewState.ADVISOR.label == "Consultor IA"


class TestStateUpdates:
    """Tests for update_state and the record wrappers."""

    def test_loads_seed_on_first_run(self, app):
        """Test the initial state."""
        assert app.state == default_state()

    def test_loads_saved_state(self, storage):
        """Test that an existing save is used instead of the seed."""
        StateRepository(storage).save(FinancialState())
        assert FinanceApp(StateRepository(storage)).state == FinancialState()

    def test_update_state_replaces_only_given_keys(self, app, storage):
        """Test the shallow merge."""
        liabilities = app.state.liabilities
        transactions = app.state.transactions

        app.update_state(assets=[])

        assert app.state.assets == []
        assert app.state.liabilities == liabilities
        assert app.state.transactions == transactions
        assert saved_state(storage)["assets"] == []
        assert len(saved_state(storage)["liabilities"]) == 1

    def test_update_state_rejects_unknown_keys(self, app):
        """Test that only the three collections can be replaced."""
        with pytest.raises(TypeError):
            app.update_state(budgets=[])

    def test_add_asset_persists(self, app, storage):
        """Test creating an asset through the shell."""
        created = app.add_asset({
            "name": "Tesouro Direto",
            "type": AssetType.INVESTMENT,
            "current_value": 1000,
            "acquisition_value": 800,
            "acquisition_date": date(2024, 2, 1),
            "liquidity": Liquidity.MEDIUM,
        })

        assert app.state.assets[-1] == created
        assert saved_state(storage)["assets"][-1]["name"] == "Tesouro Direto"

    def test_edit_asset(self, app):
        """Test editing an asset keeps its id."""
        updated = app.edit_asset("1", {"current_value": 30000})
        assert updated.id == "1"
        assert app.state.assets[0].current_value == 30000

    def test_edit_unknown_asset(self, app, storage):
        """Test that editing a missing asset changes nothing."""
        assert app.edit_asset("missing", {"current_value": 1}) is None
        assert app.state == default_state()
        assert storage.read(STORAGE_KEY) is None

    def test_remove_liability(self, app):
        """Test deleting the seed financing."""
        assert app.remove_liability("1") is True
        assert app.state.liabilities == []

    def test_remove_unknown_liability(self, app):
        """Test that deleting a missing debt leaves the collection unchanged."""
        before = app.state.liabilities
        assert app.remove_liability("999") is False
        assert app.state.liabilities == before

    def test_add_and_remove_transaction(self, app):
        """Test the transaction wrappers."""
        created = app.add_transaction({
            "description": "Mercado",
            "type": TransactionType.EXPENSE,
            "category": "Alimentação",
            "amount": 900,
            "recurrence": Recurrence.VARIABLE,
            "entry_date": date(2024, 11, 2),
        })
        assert created.is_paid is False
        assert len(app.state.transactions) == 2

        assert app.remove_transaction(created.id) is True
        assert len(app.state.transactions) == 1

    def test_reset_data(self, app, storage):
        """Test going back to the seed state."""
        app.update_state(assets=[], liabilities=[], transactions=[])
        app.reset_data()
        assert app.state == default_state()
        assert storage.read(STORAGE_KEY) is None


class TestAdvisorSession:
    """Tests for advisor requests from the shell."""

    def test_no_advisor_no_session(self, app):
        """Test that the shell works without an advisor."""
        assert app.advisor_session is None

    def test_unconfigured_advisor(self):
        """Test the missing-key path through the session."""
        session = AdvisorSession(FinancialAdvisor(GeminiSettings(api_key=None)))
        answer = asyncio.run(session.ask(default_state()))

        assert answer == MISSING_API_KEY_MESSAGE
        assert session.response == MISSING_API_KEY_MESSAGE
        assert session.loading is False

    def test_stale_answer_is_discarded(self):
        """Test that only the newest request's answer is kept."""
        advisor = GatedAdvisor()
        session = AdvisorSession(advisor)
        state = default_state()

        async def scenario():
            first = asyncio.create_task(session.ask(state, "primeira"))
            await asyncio.sleep(0)
            second = asyncio.create_task(session.ask(state, "segunda"))
            await asyncio.sleep(0)
            assert session.loading is True

            advisor.gates[1].set()
            second_answer = await second
            advisor.gates[0].set()
            first_answer = await first
            return first_answer, second_answer

        first_answer, second_answer = asyncio.run(scenario())

        assert first_answer is None
        assert second_answer == "resposta: segunda"
        assert session.response == "resposta: segunda"
        assert session.question == "segunda"
        assert session.loading is False

    def test_answer_in_order_is_kept(self):
        """Test sequential requests each update the response."""
        advisor = GatedAdvisor()
        session = AdvisorSession(advisor)

        async def ask(question):
            task = asyncio.create_task(session.ask(default_state(), question))
            await asyncio.sleep(0)
            advisor.gates[-1].set()
            return await task

        assert asyncio.run(ask("um")) == "resposta: um"
        assert asyncio.run(ask("dois")) == "resposta: dois"
        assert session.response == "resposta: dois"


class TestCreateAppComponents:
    """Tests for the wiring factory."""

    def test_with_explicit_storage(self, storage):
        """Test injecting a storage backend."""
        app = create_app_components(Settings(), storage=storage)

        assert app.state == default_state()
        assert app.advisor_session is not None

    def test_memory_backend_from_env(self, monkeypatch):
        """Test selecting in-memory storage through settings."""
        monkeypatch.setenv("FINHEALTH_STORAGE_BACKEND", "memory")
        app = create_app_components(Settings())
        app.update_state(assets=[])

        assert create_app_components(Settings()).state == default_state()

    def test_file_backend_persists_between_runs(self, monkeypatch, tmp_path):
        """Test that a second app sees what the first one saved."""
        monkeypatch.setenv("FINHEALTH_STORAGE_DATA_DIR", str(tmp_path / "data"))

        first = create_app_components(Settings())
        first.remove_asset("2")

        second = create_app_components(Settings())
        assert [a.id for a in second.state.assets] == ["1"]
        assert (tmp_path / "data" / f"{STORAGE_KEY}.json").exists()
