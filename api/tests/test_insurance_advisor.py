"""Tests for insurance advice generation."""

import asyncio
from types import SimpleNamespace

import pytest

from asset_catalog.schemas.chat import ChatAsset
from asset_catalog.services.insurance_advisor import (
    GENERIC_LOCALIZED_NOTICE,
    LOCALIZED_NOTICES,
    InsuranceAdvisor,
    build_system_prompt,
    format_money,
    rule_based_advice,
    summarize_catalog,
)

ASSETS = [
    ChatAsset(make="Sony", model="Bravia", category="electrical", value=1200),
    ChatAsset(make="Fender", model="Strat", value=800.5, date_purchased="2020-03-01"),
]


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(**kwargs):
    completions = FakeCompletions(**kwargs)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


@pytest.mark.parametrize(
    "amount,expected",
    [(0, "0"), (1500, "1,500"), (1234.5, "1,234.5"), (2000.5, "2,000.5"), (1000000, "1,000,000")],
)
def test_format_money(amount, expected):
    assert format_money(amount) == expected


class TestRuleBasedAdvice:
    """Tests for rule_based_advice."""

    def test_deductible_question(self):
        response = rule_based_advice("How does a deductible work?", ASSETS)
        assert response.startswith("A deductible is the amount you pay")
        assert "$2,000.5" in response

    def test_coverage_wins_over_later_topics(self):
        response = rule_based_advice("Should I cover my deductible?", ASSETS)
        assert response.startswith("Based on your 2 asset(s) totaling $2,000.5")

    def test_claim_question(self):
        response = rule_based_advice("How do I file a claim?", ASSETS)
        assert response.startswith("When filing an insurance claim")

    def test_premium_question(self):
        response = rule_based_advice("What will it COST me?", ASSETS)
        assert response.startswith("Insurance premiums vary")

    def test_recommendation_question(self):
        response = rule_based_advice("What do you recommend?", ASSETS)
        assert "you currently have 2" in response

    def test_default_with_value(self):
        response = rule_based_advice("hello", ASSETS)
        assert "You currently have 2 asset(s) in your catalog worth $2,000.5." in response

    def test_default_without_assets(self):
        response = rule_based_advice("hello", [])
        assert "You currently have 0 asset(s) in your catalog." in response

    def test_french_notice(self):
        assert rule_based_advice("deductible?", ASSETS, "fr") == (
            "Pour des réponses en français, veuillez configurer la clé API OpenAI. "
            "En attendant, voici des conseils généraux en anglais."
        )

    def test_other_languages(self):
        assert rule_based_advice("hi", ASSETS, "ja") == LOCALIZED_NOTICES["ja"]
        assert rule_based_advice("hi", ASSETS, "es") == GENERIC_LOCALIZED_NOTICE


def test_system_prompt_lists_catalog():
    prompt = build_system_prompt(ASSETS, "de")
    assert "You must respond in German (de)" in prompt
    assert "- Sony Bravia (electrical) - Value: $1,200" in prompt
    assert "- Fender Strat - Value: $800.5 - Purchased: 2020-03-01" in prompt


def test_empty_catalog_summary():
    assert summarize_catalog([]) == "The user has no assets in their catalog yet."


class TestInsuranceAdvisor:
    """Tests for InsuranceAdvisor."""

    def test_without_key_is_rule_based(self):
        advisor = InsuranceAdvisor(api_key=None)
        assert advisor.llm_enabled is False
        response = asyncio.run(advisor.advise("deductible?", ASSETS))
        assert response.startswith("A deductible")

    def test_uses_model_answer(self):
        client, completions = fake_client(content="Get contents insurance.")
        advisor = InsuranceAdvisor(client=client, model="gpt-test", max_tokens=123)

        response = asyncio.run(advisor.advise("What now?", ASSETS, "fr"))

        assert response == "Get contents insurance."
        call = completions.calls[0]
        assert call["model"] == "gpt-test"
        assert call["max_tokens"] == 123
        assert call["messages"][0]["role"] == "system"
        assert "French" in call["messages"][0]["content"]
        assert call["messages"][1] == {"role": "user", "content": "What now?"}

    def test_empty_completion(self):
        client, _ = fake_client(content=None)
        response = asyncio.run(InsuranceAdvisor(client=client).advise("hi", ASSETS))
        assert response == "I apologize, but I could not generate a response."

    def test_model_failure_falls_back(self):
        client, completions = fake_client(error=RuntimeError("rate limited"))
        advisor = InsuranceAdvisor(client=client)

        response = asyncio.run(advisor.advise("How do I file a claim?", ASSETS))

        assert len(completions.calls) == 1
        assert response.startswith("When filing an insurance claim")


def test_chat_endpoint(client, auth_headers):
    response = client.post(
        "/api/chat",
        json={
            "message": "What deductible is right?",
            "assets": [{"make": "Sony", "model": "Bravia", "value": 1500}],
        },
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert "portfolio worth $1,500" in response.json()["response"]


def test_chat_endpoint_localized(client, auth_headers):
    response = client.post(
        "/api/chat",
        json={"message": "Wie hoch ist die Prämie?", "language": "de"},
        headers=auth_headers,
    )
    assert response.json()["response"] == LOCALIZED_NOTICES["de"]


def test_chat_requires_message(client, auth_headers):
    response = client.post("/api/chat", json={"message": ""}, headers=auth_headers)
    assert response.status_code == 400
