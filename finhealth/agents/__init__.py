"""AI Agents package."""

from finhealth.agents.advisor import (
    EMPTY_RESPONSE_MESSAGE,
    MISSING_API_KEY_MESSAGE,
    SERVICE_ERROR_MESSAGE,
    FinancialAdvisor,
    build_prompt,
)

__all__ = [
    "EMPTY_RESPONSE_MESSAGE",
    "MISSING_API_KEY_MESSAGE",
    "SERVICE_ERROR_MESSAGE",
    "FinancialAdvisor",
    "build_prompt",
]
