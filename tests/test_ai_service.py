from datetime import date
from decimal import Decimal

import httpx
import pytest

from nexsched.ai.base import TextGenerationError
from nexsched.ai.openai_provider import OpenAIChatProvider
from nexsched.ai.placeholder_provider import MISSING_KEY_MESSAGE, PlaceholderProvider
from nexsched.ai.service import (
    ANALYSIS_EMPTY,
    ANALYSIS_ERROR,
    REMINDER_EMPTY,
    REMINDER_ERROR,
    analyze_financials,
    build_financial_prompt,
    build_reminder_prompt,
    generate_reminder_message,
    get_provider,
    summarize_financials,
)
from nexsched.config import Settings
from nexsched.models import FinancialRecord, FinancialType



class FailingProvider:
    name = "failing"

    def generate(self, prompt):
        raise TextGenerationError("upstream 500")


def _records(count):
    return [
        FinancialRecord(
            id=f"rec-{i}",
            company_id="c1",
            amount=Decimal("10"),
            type=FinancialType.income,
            date=date(2024, 1, 1),
            description="Consulta",
        )
        for i in range(count)
    ]


def test_provider_selection_by_key():
    assert isinstance(get_provider(Settings()), PlaceholderProvider)
    assert isinstance(get_provider(Settings(openai_api_key="sk-test")), OpenAIChatProvider)


def test_missing_key_returns_placeholder_text(store):
    message = generate_reminder_message(PlaceholderProvider(), store.get_appointment("a1"), "Clínica TechHealth")

    assert message == MISSING_KEY_MESSAGE
    assert summarize_financials(PlaceholderProvider(), store.financials) == MISSING_KEY_MESSAGE


def test_reminder_prompt_mentions_appointment_details(store):
    prompt = build_reminder_prompt(store.get_appointment("a2"), "Clínica TechHealth")

    assert '"Clínica TechHealth"' in prompt
    assert "Roberto Oliveira" in prompt
    assert "10/01/2024 14:00" in prompt
    assert "PENDING" in prompt


def test_reminder_uses_provider_reply(store, text_provider):
    provider = text_provider
    provider.reply = "Olá Alice!"

    assert generate_reminder_message(provider, store.get_appointment("a1"), "X") == "Olá Alice!"
    assert len(provider.prompts) == 1


def test_empty_reply_uses_fallback(store, text_provider):
    provider = text_provider
    provider.reply = ""

    assert generate_reminder_message(provider, store.get_appointment("a1"), "X") == REMINDER_EMPTY
    assert summarize_financials(provider, store.financials) == ANALYSIS_EMPTY


def test_provider_failure_is_reported_as_text(store):
    assert generate_reminder_message(FailingProvider(), store.get_appointment("a1"), "X") == REMINDER_ERROR
    assert summarize_financials(FailingProvider(), store.financials) == ANALYSIS_ERROR


def test_financial_prompt_is_limited_to_twenty_records():
    prompt = build_financial_prompt(_records(25))

    assert '"rec-19"' in prompt
    assert '"rec-20"' not in prompt


def test_financial_prompt_serialises_amounts():
    prompt = build_financial_prompt(_records(1))

    assert '"amount": "10"' in prompt
    assert '"type": "INCOME"' in prompt


def test_openai_provider_returns_first_choice():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json={"choices": [{"message": {"content": "Tudo certo."}}]})

    provider = OpenAIChatProvider("sk-test", transport=httpx.MockTransport(handler))

    assert provider.generate("oi") == "Tudo certo."
    assert seen == {"path": "/v1/chat/completions", "auth": "Bearer sk-test"}


def test_openai_provider_without_choices_returns_empty():
    provider = OpenAIChatProvider(
        "sk-test", transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": []}))
    )

    assert provider.generate("oi") == ""


def test_openai_provider_http_error():
    provider = OpenAIChatProvider(
        "sk-test", transport=httpx.MockTransport(lambda request: httpx.Response(500, json={"error": "x"}))
    )

    with pytest.raises(TextGenerationError):
        provider.generate("oi")


def test_analysis_of_no_records_is_still_text(text_provider):
    assert analyze_financials(text_provider, []) == text_provider.reply
    assert "[]" in text_provider.prompts[0]


@pytest.mark.parametrize("body", [[], {"choices": ["oi"]}, {"choices": {"0": {}}}])
def test_openai_provider_malformed_payload(body, store):
    provider = OpenAIChatProvider(
        "sk-test", transport=httpx.MockTransport(lambda request: httpx.Response(200, json=body))
    )

    with pytest.raises(TextGenerationError):
        provider.generate("oi")
    assert generate_reminder_message(provider, store.get_appointment("a1"), "X") == REMINDER_ERROR
