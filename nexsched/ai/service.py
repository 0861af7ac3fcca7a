from __future__ import annotations

import json
import logging
from typing import Iterable

from nexsched.ai.base import TextGenerationError, TextGenerationProvider
from nexsched.ai.openai_provider import OpenAIChatProvider
from nexsched.ai.placeholder_provider import PlaceholderProvider
from nexsched.config import Settings
from nexsched.models import Appointment, FinancialRecord

logger = logging.getLogger(__name__)

MAX_FINANCIAL_RECORDS = 20

REMINDER_EMPTY = "Não foi possível gerar a mensagem."
REMINDER_ERROR = "Erro ao criar mensagem inteligente."
ANALYSIS_EMPTY = "Análise indisponível."
ANALYSIS_ERROR = "Erro ao analisar financeiro."


def get_provider(settings: Settings) -> TextGenerationProvider:
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY missing; AI assist returns placeholder text")
        return PlaceholderProvider()
    return OpenAIChatProvider(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        timeout=settings.http_timeout_seconds,
    )


def build_reminder_prompt(appointment: Appointment, company_name: str) -> str:
    when = appointment.start.strftime("%d/%m/%Y %H:%M")
    return (
        f'Você é um assistente de IA para uma empresa chamada "{company_name}".\n'
        "Gere uma mensagem de WhatsApp curta, polida e profissional para um cliente "
        "(em Português do Brasil).\n\n"
        "Detalhes:\n"
        f"Nome do Cliente: {appointment.client_name}\n"
        f"Data/Hora: {when}\n"
        f"Status: {appointment.status.value}\n"
        "Ação: Lembrete/Confirmação\n\n"
        "A mensagem deve ser amigável, incluir os detalhes e pedir confirmação se o status "
        "for pendente. Não inclua linhas de assunto. Use emojis com moderação."
    )


def build_financial_prompt(records: Iterable[FinancialRecord]) -> str:
    limited = list(records)[:MAX_FINANCIAL_RECORDS]
    summary = json.dumps([r.model_dump(mode="json") for r in limited], ensure_ascii=False)
    return (
        f"Analise estes dados financeiros JSON de uma pequena empresa: {summary}.\n"
        "Forneça um resumo conciso de 3 pontos sobre a saúde financeira e sugira 1 melhoria.\n"
        "Responda em Português do Brasil.\n"
        "Formate como texto simples."
    )


def _complete(provider: TextGenerationProvider, prompt: str, empty: str, error: str) -> str:
    try:
        text = provider.generate(prompt)
    except TextGenerationError as exc:
        logger.error("Text generation via %s failed: %s", provider.name, exc)
        return error
    return text or empty


def generate_reminder_message(
    provider: TextGenerationProvider,
    appointment: Appointment,
    company_name: str,
) -> str:
    prompt = build_reminder_prompt(appointment, company_name)
    return _complete(provider, prompt, REMINDER_EMPTY, REMINDER_ERROR)


def summarize_financials(provider: TextGenerationProvider, records: Iterable[FinancialRecord]) -> str:
    prompt = build_financial_prompt(records)
    return _complete(provider, prompt, ANALYSIS_EMPTY, ANALYSIS_ERROR)


analyze_financials = summarize_financials
