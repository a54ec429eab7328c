"""
Application Shell for FinHealth

Holds the single FinancialState and the current navigation selection,
and ties the managers, the repository and the advisor together.

DESIGN DECISION: the state is replaced, never edited in place.
Every change goes through update_state(), which swaps in the new
collection(s) and immediately persists the whole state. Views get the
state to read and call the shell's methods to change it.
"""

from enum import Enum
from typing import Any, Optional

from finhealth.agents import FinancialAdvisor
from finhealth.audit import AuditLogger, configure_logging
from finhealth.config import Settings, get_settings
from finhealth.managers import (
    AssetManager,
    EditableRecordManager,
    LiabilityManager,
    RecordManager,
    TransactionManager,
)
from finhealth.models.finance import (
    Asset,
    FinancialState,
    Liability,
    Transaction,
)
from finhealth.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    StateRepository,
)


class ViewState(str, Enum):
    """Which view the shell is showing."""
    DASHBOARD = "dashboard"
    ASSETS = "assets"
    LIABILITIES = "liabilities"
    CASHFLOW = "cashflow"
    ADVISOR = "advisor"

    @property
    def label(self) -> str:
        return NAV_LABELS[self]


NAV_LABELS = {
    ViewState.DASHBOARD: "Visão Geral",
    ViewState.ASSETS: "Ativos & Bens",
    ViewState.LIABILITIES: "Dívidas & Passivos",
    ViewState.CASHFLOW: "Receitas & Despesas",
    ViewState.ADVISOR: "Consultor IA",
}


class AdvisorSession:
    """
    Advisor requests issued from the advisor view.

    Requests are numbered. When an answer comes back it is kept only if
    no newer request was started in the meantime; older answers are
    DISCARDED, not cancelled (the underlying call still runs to the end).
    """

    def __init__(
        self,
        advisor: FinancialAdvisor,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._advisor = advisor
        self._audit = audit_logger or AuditLogger()
        self._latest_request = 0
        self._answered_request = 0
        self.response: Optional[str] = None
        self.question: Optional[str] = None

    @property
    def loading(self) -> bool:
        """True while the most recent request has not been answered."""
        return self._answered_request < self._latest_request

    async def ask(
        self,
        state: FinancialState,
        question: Optional[str] = None,
    ) -> Optional[str]:
        """
        Run one advisor request against a state snapshot.

        Returns the answer, or None if a newer request superseded this one.
        """
        self._latest_request += 1
        request_id = self._latest_request
        self._audit.log_advisor_requested(request_id, bool(question))

        answer = await self._advisor.analyze(state, question)

        if request_id != self._latest_request:
            self._audit.log_advisor_result_discarded(request_id, self._latest_request)
            return None

        self._answered_request = request_id
        self.response = answer
        self.question = question
        self._audit.log_advisor_responded(request_id, len(answer))
        return answer


class FinanceApp:
    """
    The application shell.

    Owns the FinancialState and the current view. Record changes are
    delegated to the managers and committed through update_state().
    """

    def __init__(
        self,
        repository: StateRepository,
        advisor: Optional[FinancialAdvisor] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._audit = audit_logger or AuditLogger()
        self._state = repository.load()

        self.view = ViewState.DASHBOARD
        self.menu_open = False

        self.asset_manager = AssetManager()
        self.liability_manager = LiabilityManager()
        self.transaction_manager = TransactionManager()

        self.advisor_session = (
            AdvisorSession(advisor, self._audit) if advisor is not None else None
        )

    @property
    def state(self) -> FinancialState:
        return self._state

    # -------------------------------------------------------------------------
    # State and navigation
    # -------------------------------------------------------------------------

    def update_state(self, **partial: list) -> FinancialState:
        """
        Shallow-merge new collections into the state and persist it.

        Only the keys given are replaced, e.g. update_state(assets=[...])
        leaves liabilities and transactions as they were.
        """
        unknown = set(partial) - set(FinancialState.model_fields)
        if unknown:
            raise TypeError(f"Unknown state keys: {', '.join(sorted(unknown))}")

        self._state = self._state.model_copy(update=partial)
        self._repository.save(self._state)
        return self._state

    def navigate(self, view: ViewState) -> None:
        """Switch view. Any view is reachable from any other."""
        self.view = ViewState(view)
        self.menu_open = False

    def toggle_menu(self) -> None:
        self.menu_open = not self.menu_open

    def reset_data(self) -> FinancialState:
        """Clear saved data and go back to the default seed state."""
        self._repository.reset()
        self._state = self._repository.load()
        return self._state

    # -------------------------------------------------------------------------
    # Assets
    # -------------------------------------------------------------------------

    def add_asset(self, fields: dict[str, Any]) -> Asset:
        return self._create("assets", self.asset_manager, fields)

    def edit_asset(self, asset_id: str, fields: dict[str, Any]) -> Optional[Asset]:
        return self._update("assets", self.asset_manager, asset_id, fields)

    def remove_asset(self, asset_id: str) -> bool:
        return self._delete("assets", self.asset_manager, asset_id)

    # -------------------------------------------------------------------------
    # Liabilities
    # -------------------------------------------------------------------------

    def add_liability(self, fields: dict[str, Any]) -> Liability:
        return self._create("liabilities", self.liability_manager, fields)

    def edit_liability(self, liability_id: str, fields: dict[str, Any]) -> Optional[Liability]:
        return self._update("liabilities", self.liability_manager, liability_id, fields)

    def remove_liability(self, liability_id: str) -> bool:
        return self._delete("liabilities", self.liability_manager, liability_id)

    # -------------------------------------------------------------------------
    # Transactions (no edit)
    # -------------------------------------------------------------------------

    def add_transaction(self, fields: dict[str, Any]) -> Transaction:
        return self._create("transactions", self.transaction_manager, fields)

    def remove_transaction(self, transaction_id: str) -> bool:
        return self._delete("transactions", self.transaction_manager, transaction_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _create(self, collection: str, manager: RecordManager, fields: dict[str, Any]):
        records = manager.create(getattr(self._state, collection), fields)
        self.update_state(**{collection: records})
        created = records[-1]
        self._audit.log_record_created(manager.entity_type, created.id, _label(created))
        return created

    def _update(
        self,
        collection: str,
        manager: EditableRecordManager,
        record_id: str,
        fields: dict[str, Any],
    ):
        current = getattr(self._state, collection)
        if manager.get(current, record_id) is None:
            self._audit.log_record_not_found(manager.entity_type, record_id, "update")
            return None
        records = manager.update(current, record_id, fields)
        self.update_state(**{collection: records})
        updated = manager.get(records, record_id)
        self._audit.log_record_updated(manager.entity_type, record_id, _label(updated))
        return updated

    def _delete(self, collection: str, manager: RecordManager, record_id: str) -> bool:
        current = getattr(self._state, collection)
        if manager.get(current, record_id) is None:
            self._audit.log_record_not_found(manager.entity_type, record_id, "delete")
            return False
        self.update_state(**{collection: manager.delete(current, record_id)})
        self._audit.log_record_deleted(manager.entity_type, record_id)
        return True


def _label(record) -> str:
    return getattr(record, "name", None) or getattr(record, "description", "")


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
) -> FinanceApp:
    """
    Factory function to create the application shell.

    Args:
        settings: Settings to use; the cached global settings by default.
        storage: Storage backend override. When None, the backend named
                 in the storage settings is built.

    Returns:
        A FinanceApp with its state already loaded
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage

    configure_logging(app_settings.log_level)
    audit_logger = AuditLogger()

    if storage is None:
        if storage_settings.backend == "memory":
            storage = InMemoryStorage()
        else:
            storage = JsonFileStorage(storage_settings.data_dir)

    repository = StateRepository(
        storage,
        key=storage_settings.state_key,
        audit_logger=audit_logger,
    )
    advisor = FinancialAdvisor(settings.gemini, audit_logger=audit_logger)

    return FinanceApp(repository, advisor=advisor, audit_logger=audit_logger)
