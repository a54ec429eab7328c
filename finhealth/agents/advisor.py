"""
Financial Advisor Agent

Sends a snapshot of the user's finances to Gemini and returns the
answer as Markdown text, unmodified.

CRITICAL BOUNDARIES:
- The advisor NEVER raises. Every outcome is displayable text:
  the model's answer, or one of the fixed messages below.
- A missing API key is a normal condition, reported without calling out.
- One request per call. No retry, no timeout, no streaming, no cache.
- The advisor only READS the state it is given.
"""

import json
from typing import Optional

import google.generativeai as genai
import structlog

from finhealth.analytics.metrics import summarize
from finhealth.audit import AuditLogger
from finhealth.config import GeminiSettings, get_settings
from finhealth.models.finance import FinancialState


logger = structlog.get_logger(__name__)


MISSING_API_KEY_MESSAGE = (
    "Erro: Chave API não configurada. Por favor, verifique suas configurações."
)
SERVICE_ERROR_MESSAGE = (
    "Desculpe, ocorreu um erro ao conectar com o assistente inteligente."
)
EMPTY_RESPONSE_MESSAGE = "Não foi possível gerar uma análise no momento."

GENERAL_ANALYSIS_INSTRUCTION = (
    "Forneça uma análise resumida da saúde financeira, identifique riscos "
    "(como alta dívida ou baixa liquidez) e sugira 3 ações práticas para "
    "melhorar o patrimônio."
)


def build_prompt(state: FinancialState, question: Optional[str] = None) -> str:
    """
    Build the advisor prompt for a state snapshot.

    Embeds the headline figures and a flat list of every asset and
    liability, then either the user's question verbatim or the generic
    "summarize and suggest 3 actions" instruction.
    """
    summary = summarize(state)

    assets = [
        {
            "nome": a.name,
            "tipo": a.type.value,
            "valor": a.current_value,
            "liquidez": a.liquidity.value,
        }
        for a in state.assets
    ]
    liabilities = [
        {
            "nome": debt.name,
            "tipo": debt.type.value,
            "valorTotal": debt.total_value,
            "parcela": debt.installment_value,
            "juros": debt.interest_rate,
        }
        for debt in state.liabilities
    ]

    if question and question.strip():
        instruction = (
            f'O usuário perguntou: "{question}". '
            "Responda especificamente a isso com base nos dados."
        )
    else:
        instruction = GENERAL_ANALYSIS_INSTRUCTION

    return f"""Você é um consultor financeiro especialista. Analise os seguintes dados do usuário (valores em BRL):

Patrimônio Líquido: {summary.net_worth:.2f}
Total Ativos: {summary.total_assets:.2f}
Total Passivos (Dívidas): {summary.total_liabilities:.2f}
Receita Mensal Estimada: {summary.monthly_active_income:.2f}
Despesa Mensal Estimada: {summary.monthly_expenses:.2f}

Detalhes dos Ativos: {json.dumps(assets, ensure_ascii=False)}
Detalhes dos Passivos: {json.dumps(liabilities, ensure_ascii=False)}

Instrução: {instruction}

Formate a resposta em Markdown, use listas com marcadores para facilitar a leitura. Seja direto e encorajador."""


class FinancialAdvisor:
    """
    Gemini-backed advisor.

    The Gemini model is created on first use, so constructing an advisor
    without a key (or without network) is always safe.
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model=None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings().gemini
        self._model = model
        self._audit = audit_logger or AuditLogger()

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def _get_model(self):
        """Configure Google Generative AI and build the model."""
        if self._model is None:
            genai.configure(api_key=self._settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=self._settings.model_name,
                generation_config={
                    "temperature": self._settings.temperature,
                    "max_output_tokens": self._settings.max_tokens,
                },
            )
        return self._model

    async def analyze(
        self,
        state: FinancialState,
        question: Optional[str] = None,
    ) -> str:
        """
        Ask the model about the given state.

        Returns the model's Markdown answer, or a fixed Portuguese
        message when the key is missing, the call fails, or the answer
        is empty.
        """
        if not self.is_configured:
            self._audit.log_advisor_not_configured()
            return MISSING_API_KEY_MESSAGE

        prompt = build_prompt(state, question)

        try:
            response = await self._get_model().generate_content_async(prompt)
            # .text raises ValueError when the answer was blocked
            text = response.text
        except Exception as e:
            logger.exception("advisor_call_failed", model=self._settings.model_name)
            self._audit.log_external_service_error("gemini", str(e))
            return SERVICE_ERROR_MESSAGE

        if not text or not text.strip():
            return EMPTY_RESPONSE_MESSAGE
        return text
