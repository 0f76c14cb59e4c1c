"""Insurance advice generation.

Answers go through an OpenAI chat model when an API key is configured and
fall back to keyword-matched canned advice otherwise, or when the model
call fails for any reason.
"""

import logging
from typing import Any, Optional, Sequence

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {
    "en": "English",
    "fr": "French",
    "de": "German",
    "ja": "Japanese",
}

LOCALIZED_NOTICES = {
    "fr": "Pour des réponses en français, veuillez configurer la clé API OpenAI. En attendant, voici des conseils généraux en anglais.",
    "de": "Für Antworten auf Deutsch konfigurieren Sie bitte den OpenAI API-Schlüssel. Hier sind vorerst allgemeine Ratschläge auf Englisch.",
    "ja": "日本語での回答には、OpenAI APIキーの設定が必要です。当面は、英語での一般的なアドバイスを提供します。",
}
GENERIC_LOCALIZED_NOTICE = "For localized responses, please configure the OpenAI API key."

EMPTY_COMPLETION = "I apologize, but I could not generate a response."


def format_money(amount: float) -> str:
    """Group thousands and drop trailing zeros, like ``Number.toLocaleString('en-US')``.

    Examples:
        >>> format_money(1500)
        '1,500'
        >>> format_money(1234.5)
        '1,234.5'
    """
    return f"{amount:,.3f}".rstrip("0").rstrip(".")


def _total_value(assets: Sequence[Any]) -> float:
    return sum(a.value for a in assets)


def summarize_catalog(assets: Sequence[Any]) -> str:
    if not assets:
        return "The user has no assets in their catalog yet."

    lines = []
    for a in assets:
        line = f"- {a.make} {a.model}"
        if a.category:
            line += f" ({a.category})"
        line += f" - Value: ${format_money(a.value)}"
        if a.date_purchased:
            line += f" - Purchased: {a.date_purchased}"
        lines.append(line)

    return f"The user has {len(assets)} asset(s) in their catalog:\n" + "\n".join(lines)


def build_system_prompt(assets: Sequence[Any], language: str) -> str:
    language_name = LANGUAGE_NAMES.get(language, "English")
    return f"""You are a professional insurance advisor specializing in asset insurance. Your role is to provide helpful, accurate, and practical advice about insuring personal assets.

IMPORTANT: You must respond in {language_name} ({language}). All your responses should be in {language_name} language.

Key guidelines:
- Provide clear, actionable advice
- Consider the user's specific assets when relevant
- Explain insurance concepts in simple terms
- Recommend appropriate coverage levels
- Mention important considerations like deductibles, coverage limits, and exclusions
- Be professional but friendly
- If asked about specific assets, reference the user's catalog when relevant
- Always emphasize the importance of reading policy documents carefully
- Respond entirely in {language_name} language

User's asset catalog:
{summarize_catalog(assets)}

Respond concisely but thoroughly in {language_name}. If the question is about a specific asset, reference it from the catalog if available."""


def _coverage_advice(count: int, total: str) -> str:
    return f"""Based on your {count} asset(s) totaling ${total}, I recommend:

1. **Home Contents Insurance**: Covers most household items including electronics, furniture, and tools. Typically covers theft, fire, and water damage.

2. **Valuable Items Insurance**: For high-value items (usually over $1,000-$2,000), consider scheduling them separately for full replacement value coverage.

3. **Specialty Insurance**:
   - Electronics: May need additional coverage for accidental damage
   - Jewellery: Often requires separate appraisal and scheduling
   - Instruments: May need specialized musical instrument insurance

4. **Coverage Amount**: Ensure your policy limit covers your total portfolio value (${total}).

Would you like advice on any specific category of assets?"""


def _premium_advice(count: int, total: str) -> str:
    return f"""Insurance premiums vary based on several factors:

1. **Total Coverage Amount**: Your portfolio value of ${total} will influence premium costs.

2. **Deductible**: Higher deductibles typically lower premiums but increase out-of-pocket costs.

3. **Location**: Risk factors in your area (crime rates, natural disasters) affect pricing.

4. **Item Types**: High-value electronics, jewellery, and instruments may increase premiums.

5. **Security Measures**: Security systems, safes, and alarms can reduce premiums.

Average home contents insurance costs $50-$200/month depending on coverage. For specific quotes, contact insurance providers directly.

Would you like tips on reducing insurance costs?"""


def _deductible_advice(count: int, total: str) -> str:
    return f"""A deductible is the amount you pay out-of-pocket before insurance coverage kicks in.

**Choosing a Deductible:**

- **Low Deductible ($250-$500)**: Higher premiums, but less out-of-pocket when filing claims. Good if you expect frequent claims.

- **High Deductible ($1,000-$2,500)**: Lower premiums, but more out-of-pocket per claim. Good if you want to save on monthly costs and rarely file claims.

**Recommendation**: For a portfolio worth ${total}, consider a $500-$1,000 deductible as a balance between premium cost and coverage accessibility.

Remember: Only file claims for significant losses to avoid premium increases."""


def _claim_advice(count: int, total: str) -> str:
    return """When filing an insurance claim:

1. **Document Everything**: Take photos/videos of damaged items, keep receipts, and maintain your asset catalog (like this one!).

2. **File Promptly**: Most policies require claims within a certain timeframe (often 30-60 days).

3. **Know Your Policy**: Understand what's covered, deductibles, and coverage limits before filing.

4. **Prevent Future Claims**:
   - Keep detailed records (photos, serial numbers, purchase dates)
   - Store valuable items securely
   - Maintain security systems

5. **Consider Claim Impact**: Frequent claims can increase premiums or lead to policy cancellation.

Your asset catalog is already helping with documentation! Make sure to keep it updated with purchase dates and values."""


def _recommendation_advice(count: int, total: str) -> str:
    return f"""Based on your {count} asset(s), here are my recommendations:

1. **Review Your Current Policy**: Ensure coverage limits match your total portfolio value (${total}).

2. **Schedule High-Value Items**: Items over $1,000-$2,000 should be scheduled separately for full replacement value.

3. **Update Regularly**: As you add assets (you currently have {count}), update your insurance coverage accordingly.

4. **Document Everything**: Your asset catalog is excellent documentation! Keep it updated with:
   - Purchase dates
   - Receipts/photos
   - Serial numbers
   - Current values

5. **Consider Specialized Coverage**:
   - Electronics: May need accidental damage coverage
   - Jewellery: Often requires separate appraisal
   - Instruments: Specialized insurance may be better

Would you like specific advice about any of your assets?"""


# Checked in order; the first topic with a matching keyword answers.
TOPICS = (
    (("coverage", "cover"), _coverage_advice),
    (("premium", "cost"), _premium_advice),
    (("deductible",), _deductible_advice),
    (("claim", "file"), _claim_advice),
    (("recommend", "should"), _recommendation_advice),
)


def _default_advice(count: int, total_value: float) -> str:
    worth = f" worth ${format_money(total_value)}" if total_value > 0 else ""
    return f"""I'm here to help with insurance advice for your assets!

You currently have {count} asset(s) in your catalog{worth}.

I can help with:
- Coverage recommendations
- Understanding deductibles
- Filing claims
- Premium costs
- Specific asset categories

What would you like to know?"""


def rule_based_advice(message: str, assets: Sequence[Any], language: str = "en") -> str:
    """Deterministic advice from keyword matching.

    Only English is templated; other languages get a notice asking for an
    API key to be configured.
    """
    if language != "en":
        return LOCALIZED_NOTICES.get(language, GENERIC_LOCALIZED_NOTICE)

    lower_message = message.lower()
    total_value = _total_value(assets)
    total = format_money(total_value)

    for keywords, template in TOPICS:
        if any(k in lower_message for k in keywords):
            return template(len(assets), total)

    return _default_advice(len(assets), total_value)


class InsuranceAdvisor:
    """Generates insurance advice for a household's catalog."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: int = 500,
        client: Optional[Any] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        if client is None and api_key:
            client = AsyncOpenAI(api_key=api_key)
        self.client = client

    @property
    def llm_enabled(self) -> bool:
        return self.client is not None

    async def advise(self, message: str, assets: Sequence[Any], language: str = "en") -> str:
        if self.llm_enabled:
            try:
                return await self._generate_with_llm(message, assets, language)
            except Exception as e:
                logger.warning(f"OpenAI API error, falling back to rule-based response: {e}")

        return rule_based_advice(message, assets, language)

    async def _generate_with_llm(self, message: str, assets: Sequence[Any], language: str) -> str:
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": build_system_prompt(assets, language)},
                {"role": "user", "content": message},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not completion.choices:
            return EMPTY_COMPLETION
        return completion.choices[0].message.content or EMPTY_COMPLETION
