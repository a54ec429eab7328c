"""
Streamlit Frontend for FinHealth

Single-page app with five views: overview, assets, liabilities,
cash flow and the AI advisor.

DESIGN PRINCIPLES:
1. The FinanceApp shell is the only owner of the state
2. Views read app.state and change it only through app methods
3. Deleting an asset or a debt asks for confirmation first
4. Every change is saved immediately
"""

import asyncio
from typing import Optional

import altair as alt
import streamlit as st

from finhealth.analytics import (
    asset_allocation,
    asset_monthly_income,
    asset_roi,
    cash_flow_overview,
    summarize,
)
from finhealth.config import validate_all_settings
from finhealth.managers import RecordValidationError
from finhealth.models.finance import (
    AssetType,
    LiabilityStatus,
    LiabilityType,
    Liquidity,
    Recurrence,
    TransactionType,
)
from finhealth.orchestrator import FinanceApp, ViewState, create_app_components


# Page configuration
st.set_page_config(
    page_title="FinHealth Pro",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

CHART_COLORS = ["#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#8884d8", "#82ca9d"]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_app() -> FinanceApp:
    """One shell per browser session."""
    if "finance_app" not in st.session_state:
        st.session_state.finance_app = create_app_components()
    return st.session_state.finance_app


def brl(value: float) -> str:
    return f"R$ {value:,.2f}"


def main():
    """Main application entry point."""
    app = get_app()

    st.sidebar.title("💰 FinHealth Pro")
    st.sidebar.markdown("---")

    views = list(ViewState)
    selected = st.sidebar.radio(
        "Navegação",
        views,
        index=views.index(app.view),
        format_func=lambda v: v.label,
    )
    if selected != app.view:
        app.navigate(selected)

    st.sidebar.markdown("---")
    render_settings_panel(app)
    st.sidebar.caption("v1.0.0 - Dados locais")

    if app.view == ViewState.DASHBOARD:
        render_dashboard_page(app)
    elif app.view == ViewState.ASSETS:
        render_assets_page(app)
    elif app.view == ViewState.LIABILITIES:
        render_liabilities_page(app)
    elif app.view == ViewState.CASHFLOW:
        render_cashflow_page(app)
    elif app.view == ViewState.ADVISOR:
        render_advisor_page(app)


# =============================================================================
# OVERVIEW
# =============================================================================

def render_dashboard_page(app: FinanceApp):
    """Read-only overview of the whole state."""
    st.title("Dashboard Financeiro")

    state = app.state
    summary = summarize(state)

    col1, col2, col3 = st.columns(3)
    col1.metric("Patrimônio Bruto", brl(summary.total_assets))
    col1.caption(f"Total de {summary.asset_count} ativos")
    col2.metric("Dívida Total", brl(summary.total_liabilities))
    col2.caption(f"{summary.liability_count} passivos")
    col3.metric("Patrimônio Líquido", brl(summary.net_worth))
    col3.caption("Ativos - Passivos")

    col4, col5, col6 = st.columns(3)
    col4.metric("Renda Mensal Estimada", brl(summary.monthly_income))
    col4.caption(
        f"Ativa: {summary.active_income_share:.0f}% | "
        f"Passiva: {summary.passive_income_share:.0f}%"
    )
    col5.metric("Parcelas Mensais", brl(summary.monthly_installments))
    col5.caption("Comprometimento de dívidas")
    col6.metric("Saldo Mensal (Previsto)", brl(summary.monthly_balance))
    col6.caption("Renda - (Despesas + Parcelas)")

    st.markdown("---")
    chart_left, chart_right = st.columns(2)

    with chart_left:
        st.subheader("Distribuição de Ativos")
        slices = asset_allocation(state.assets)
        if slices:
            data = [
                {"type": s.type.value, "value": s.value, "label": brl(s.value)}
                for s in slices
            ]
            chart = alt.Chart(alt.Data(values=data)).mark_arc(innerRadius=60).encode(
                theta=alt.Theta("value:Q"),
                color=alt.Color(
                    "type:N",
                    title="Tipo",
                    scale=alt.Scale(range=CHART_COLORS),
                    sort=None,
                ),
                tooltip=[alt.Tooltip("type:N", title="Tipo"), alt.Tooltip("label:N", title="Valor")],
            ).properties(height=280)
            st.altair_chart(chart, use_container_width=True)
        else:
            st.info("Sem dados de ativos")

    with chart_right:
        st.subheader("Fluxo Mensal Estimado (Macro)")
        rows = cash_flow_overview(summary)
        data = [{"name": r.name, "value": r.value, "label": brl(r.value)} for r in rows]
        chart = alt.Chart(alt.Data(values=data)).mark_bar(size=50).encode(
            x=alt.X("name:N", title=None, sort=None),
            y=alt.Y("value:Q", title="Total"),
            tooltip=[alt.Tooltip("label:N", title="Total")],
        ).properties(height=280)
        st.altair_chart(chart, use_container_width=True)
        st.caption(
            f"Entrada Ativa: {brl(summary.monthly_active_income)} | "
            f"Entrada Passiva: {brl(summary.monthly_passive_income)}"
        )


# =============================================================================
# DELETE CONFIRMATION
# =============================================================================

def request_delete(kind: str, record_id: str):
    st.session_state.pending_delete = (kind, record_id)


def render_delete_confirmation(kind: str, message: str, on_confirm) -> None:
    """Show the confirm/cancel box when a delete of this kind is pending."""
    pending: Optional[tuple[str, str]] = st.session_state.get("pending_delete")
    if not pending or pending[0] != kind:
        return

    st.warning(message)
    yes, no, _ = st.columns([1, 1, 4])
    if yes.button("Excluir", key=f"confirm_delete_{kind}", type="primary"):
        on_confirm(pending[1])
        st.session_state.pending_delete = None
        st.rerun()
    if no.button("Cancelar", key=f"cancel_delete_{kind}"):
        st.session_state.pending_delete = None
        st.rerun()


# =============================================================================
# ASSETS
# =============================================================================

def render_assets_page(app: FinanceApp):
    """Asset form and list."""
    manager = app.asset_manager
    editing_id = st.session_state.get("editing_asset_id")

    header, action = st.columns([4, 1])
    header.title("Meus Ativos")
    if action.button("➕ Novo Ativo"):
        st.session_state.editing_asset_id = None
        st.session_state.asset_form_open = not st.session_state.get("asset_form_open", False)
        st.rerun()

    if st.session_state.get("asset_form_open"):
        existing = manager.get(app.state.assets, editing_id) if editing_id else None
        values = manager.to_form(existing) if existing else manager.form_defaults()

        with st.form("asset_form"):
            st.subheader("Editar Ativo" if existing else "Cadastrar Ativo")
            name = st.text_input("Nome do Ativo", value=values["name"], placeholder="Ex: Tesouro Direto 2035")
            col1, col2 = st.columns(2)
            asset_type = col1.selectbox(
                "Tipo", list(AssetType),
                index=list(AssetType).index(values["type"]),
                format_func=lambda x: x.value,
            )
            liquidity = col2.selectbox(
                "Liquidez", list(Liquidity),
                index=list(Liquidity).index(values["liquidity"]),
                format_func=lambda x: x.value,
            )
            current_value = col1.number_input("Valor Atual (R$)", value=float(values["current_value"]), step=0.01)
            acquisition_value = col2.number_input(
                "Valor de Aquisição (R$)", value=float(values["acquisition_value"]), step=0.01
            )
            acquisition_date = col1.date_input("Data de Aquisição", value=values["acquisition_date"])
            monthly_yield = col2.number_input(
                "Rendimento Mensal (%)", value=float(values["monthly_yield"] or 0.0), step=0.01
            )

            if st.form_submit_button("Salvar", type="primary"):
                fields = {
                    "name": name,
                    "type": asset_type,
                    "current_value": current_value,
                    "acquisition_value": acquisition_value,
                    "acquisition_date": acquisition_date,
                    "liquidity": liquidity,
                    "monthly_yield": monthly_yield,
                }
                try:
                    if existing:
                        app.edit_asset(existing.id, fields)
                    else:
                        app.add_asset(fields)
                except RecordValidationError as e:
                    st.error(f"Preencha os campos obrigatórios: {', '.join(e.fields)}")
                else:
                    st.session_state.asset_form_open = False
                    st.session_state.editing_asset_id = None
                    st.rerun()

    render_delete_confirmation(
        "asset", "Tem certeza que deseja excluir este ativo?", app.remove_asset
    )

    if not app.state.assets:
        st.info("Nenhum ativo cadastrado.")
        return

    for asset in app.state.assets:
        roi = asset_roi(asset)
        cols = st.columns([3, 2, 2, 2, 1, 1, 1])
        cols[0].markdown(f"**{asset.name}**  \n{asset.type.value}")
        cols[1].markdown(f"{brl(asset.current_value)}  \nAquisição: {brl(asset.acquisition_value)}")
        cols[2].markdown(f"{'📈' if roi >= 0 else '📉'} {roi:.2f}% (Total)")
        cols[3].markdown(f"🪙 {brl(asset_monthly_income(asset))}/mês")
        cols[4].markdown(asset.liquidity.value)
        if cols[5].button("✏️", key=f"edit_asset_{asset.id}"):
            st.session_state.editing_asset_id = asset.id
            st.session_state.asset_form_open = True
            st.rerun()
        if cols[6].button("🗑️", key=f"delete_asset_{asset.id}"):
            request_delete("asset", asset.id)
            st.rerun()


# =============================================================================
# LIABILITIES
# =============================================================================

def render_liabilities_page(app: FinanceApp):
    """Debt form and list."""
    manager = app.liability_manager
    editing_id = st.session_state.get("editing_liability_id")

    header, action = st.columns([4, 1])
    header.title("Passivos e Dívidas")
    if action.button("➕ Nova Dívida"):
        st.session_state.editing_liability_id = None
        st.session_state.liability_form_open = not st.session_state.get("liability_form_open", False)
        st.rerun()

    if st.session_state.get("liability_form_open"):
        existing = manager.get(app.state.liabilities, editing_id) if editing_id else None
        values = manager.to_form(existing) if existing else manager.form_defaults()

        with st.form("liability_form"):
            st.subheader("Editar Dívida" if existing else "Cadastrar Dívida")
            name = st.text_input("Descrição da Dívida", value=values["name"])
            col1, col2 = st.columns(2)
            liability_type = col1.selectbox(
                "Tipo", list(LiabilityType),
                index=list(LiabilityType).index(values["type"]),
                format_func=lambda x: x.value,
            )
            status = col2.selectbox(
                "Status", list(LiabilityStatus),
                index=list(LiabilityStatus).index(values["status"]),
                format_func=lambda x: x.value,
            )
            total_value = col1.number_input("Valor Total Devido (R$)", value=float(values["total_value"]), step=0.01)
            interest_rate = col2.number_input("Juros (% ao mês)", value=float(values["interest_rate"] or 0.0), step=0.01)
            installments_count = col1.number_input(
                "Parcelas Restantes", value=int(values["installments_count"] or 0), step=1
            )
            installment_value = col2.number_input(
                "Valor da Parcela (R$)", value=float(values["installment_value"]), step=0.01
            )
            start_date = col1.date_input("Data de Início", value=values["start_date"])

            if st.form_submit_button("Salvar", type="primary"):
                fields = {
                    "name": name,
                    "type": liability_type,
                    "total_value": total_value,
                    "interest_rate": interest_rate,
                    "installments_count": int(installments_count),
                    "installment_value": installment_value,
                    "start_date": start_date,
                    "status": status,
                }
                try:
                    if existing:
                        app.edit_liability(existing.id, fields)
                    else:
                        app.add_liability(fields)
                except RecordValidationError as e:
                    st.error(f"Preencha os campos obrigatórios: {', '.join(e.fields)}")
                else:
                    st.session_state.liability_form_open = False
                    st.session_state.editing_liability_id = None
                    st.rerun()

    render_delete_confirmation(
        "liability", "Tem certeza que deseja excluir esta dívida?", app.remove_liability
    )

    if not app.state.liabilities:
        st.info("Nenhuma dívida cadastrada.")
        return

    for debt in app.state.liabilities:
        cols = st.columns([3, 2, 2, 1, 1, 1, 1])
        cols[0].markdown(f"**{debt.name}**  \n{debt.type.value}")
        cols[1].markdown(brl(debt.total_value))
        count = f"{debt.installments_count}x " if debt.installments_count is not None else ""
        cols[2].markdown(f"{count}{brl(debt.installment_value)}")
        cols[3].markdown(f"{debt.interest_rate or 0:.2f}% a.m.")
        cols[4].markdown(debt.status.value)
        if cols[5].button("✏️", key=f"edit_liability_{debt.id}"):
            st.session_state.editing_liability_id = debt.id
            st.session_state.liability_form_open = True
            st.rerun()
        if cols[6].button("🗑️", key=f"delete_liability_{debt.id}"):
            request_delete("liability", debt.id)
            st.rerun()


# =============================================================================
# CASH FLOW
# =============================================================================

TRANSACTION_FORM_FIELDS = ("description", "type", "category", "amount", "recurrence", "entry_date")


def submit_transaction(app: FinanceApp):
    """Add-transaction callback. Runs before the widgets are rebuilt."""
    fields = {name: st.session_state[f"tx_{name}"] for name in TRANSACTION_FORM_FIELDS}
    try:
        app.add_transaction(fields)
    except RecordValidationError as e:
        st.session_state.tx_error = f"Preencha os campos obrigatórios: {', '.join(e.fields)}"
        return

    st.session_state.tx_error = None
    for name, value in app.transaction_manager.form_after_submit(fields).items():
        st.session_state[f"tx_{name}"] = value


def render_cashflow_page(app: FinanceApp):
    """Transaction form, income overview and list."""
    st.title("Receitas & Despesas")
    summary = summarize(app.state)

    form_col, list_col = st.columns([1, 2])

    with form_col:
        st.subheader("Novo Lançamento / Salário")
        st.caption("Adicione aqui seu salário ou outras receitas manuais.")
        for name, value in app.transaction_manager.form_defaults().items():
            st.session_state.setdefault(f"tx_{name}", value)

        with st.form("transaction_form"):
            st.text_input("Descrição", key="tx_description", placeholder="Ex: Salário Mensal")
            st.selectbox(
                "Tipo", list(TransactionType),
                key="tx_type",
                format_func=lambda x: x.value,
            )
            st.number_input("Valor", key="tx_amount", step=0.01)
            st.text_input("Categoria", key="tx_category", placeholder="Ex: Mercado, Salário")
            st.selectbox(
                "Recorrência", list(Recurrence),
                key="tx_recurrence",
                format_func=lambda x: x.value,
            )
            st.date_input("Data", key="tx_entry_date")
            st.form_submit_button(
                "➕ Adicionar", type="primary", on_click=submit_transaction, args=(app,)
            )

        if st.session_state.get("tx_error"):
            st.error(st.session_state.tx_error)

    with list_col:
        st.subheader("Visão Macro de Renda")
        c1, c2, c3 = st.columns(3)
        c1.metric("Salário / Ativa", brl(summary.monthly_active_income))
        c2.metric("Passiva (Ativos)", brl(summary.monthly_passive_income))
        c3.metric("Total Mensal", brl(summary.monthly_income))

        c4, c5 = st.columns(2)
        c4.metric("Receitas Totais (Macro)", brl(summary.monthly_income))
        c5.metric("Despesas Estimadas", brl(summary.monthly_expenses))

        st.markdown("---")
        if not app.state.transactions:
            st.info("Nenhum lançamento registrado.")
        for tx in app.state.transactions:
            cols = st.columns([3, 2, 2, 2, 1])
            icon = "🟢" if tx.type == TransactionType.INCOME else "🔴"
            cols[0].markdown(f"{icon} **{tx.description}**  \n{tx.category}")
            cols[1].markdown(brl(tx.amount))
            cols[2].markdown(tx.recurrence.value)
            cols[3].markdown(tx.entry_date.strftime("%d/%m/%Y"))
            # No confirmation for transactions
            if cols[4].button("🗑️", key=f"delete_transaction_{tx.id}"):
                app.remove_transaction(tx.id)
                st.rerun()


# =============================================================================
# ADVISOR
# =============================================================================

def render_advisor_page(app: FinanceApp):
    """Ask the AI advisor about the current state."""
    st.title("✨ Consultor Inteligente")
    st.markdown(
        "Utilize nossa IA para analisar sua saúde financeira, identificar "
        "oportunidades de economia e simular cenários futuros."
    )

    session = app.advisor_session
    if session is None:
        st.error("Consultor indisponível.")
        return

    if st.button("Gerar Análise Completa", type="primary"):
        with st.spinner("Analisando suas finanças..."):
            run_async(session.ask(app.state))

    st.markdown("---")
    st.subheader("Simulações e Perguntas")
    question = st.text_input(
        "Sua pergunta",
        placeholder="Ex: Se eu quitar o financiamento do carro, como fica meu fluxo de caixa?",
    )
    if st.button("Perguntar", disabled=not question):
        with st.spinner("Consultando o assistente..."):
            run_async(session.ask(app.state, question))

    if session.response:
        st.markdown(session.response)
    elif not session.loading:
        st.info("Os resultados da análise aparecerão aqui.")


# =============================================================================
# SETTINGS
# =============================================================================

def render_settings_panel(app: FinanceApp):
    """Connection status and data reset, tucked into the sidebar."""
    with st.sidebar.expander("⚙️ Configurações"):
        status = validate_all_settings()
        if status.get("gemini"):
            st.success("Gemini (IA) - Configurado")
        else:
            st.error(f"Gemini (IA) - {status.get('gemini_error', 'Não configurado')}")
        if not status.get("storage"):
            st.error(f"Armazenamento - {status.get('storage_error')}")

        if st.button("Restaurar dados de exemplo"):
            app.reset_data()
            st.rerun()


if __name__ == "__main__":
    main()
