"""LLM classification backend.

The resolver treats the backend as text in, text out: it hands over a prompt
that embeds the transaction and the category catalog and gets the raw reply
back. Interpreting the reply is the job of ``categorization.reply``.
"""

import logging
from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable

from openai import AsyncOpenAI, OpenAIError

from home_budget.config import settings
from home_budget.core.exceptions import ClassifierUnavailableError
from home_budget.models.category import Category

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an assistant that categorizes bank transactions. "
    "You always answer with a single JSON object and nothing else."
)

REPLY_SCHEMA = """{
  "category_id": "id of the chosen category",
  "confidence": 0.0-1.0,
  "display_name": "Short, readable name of the transaction (max 50 characters)",
  "description": "Concise description, e.g. 'Groceries at Lidl' or 'Rent transfer' (max 200 characters)"
}"""


@runtime_checkable
class Classifier(Protocol):
    """Anything that turns a prompt into the raw reply text."""

    async def complete(self, prompt: str) -> str: ...


def build_prompt(
    raw_description: str,
    amount: Decimal,
    transaction_date: date,
    counterparty_name: str | None,
    categories: Sequence[Category],
) -> str:
    """Render the user prompt for one transaction.

    Each category is listed with its id and optional ``ai_prompt`` hint.
    """
    catalog = "\n".join(
        f"- {c.name} (ID: {c.id}): {c.ai_prompt or 'No description'}" for c in categories
    )

    return f"""Categorize this bank transaction.

Transaction:
- Description: {raw_description}
- Amount: {amount}
- Date: {transaction_date.isoformat()}
- Counterparty: {counterparty_name or 'Unknown'}

Available categories:
{catalog}

Reply ONLY with JSON in this format (no text before or after):
{REPLY_SCHEMA}"""


class OpenAIClassifier:
    """Chat-completion classifier backed by the OpenAI API.

    The client is created on first use so the application can start without
    an API key; a missing key surfaces as ``ClassifierUnavailableError`` on
    the first AI-path categorization.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
    ):
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.openai_model
        self.temperature = settings.openai_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.openai_max_tokens
        self.timeout = timeout or settings.openai_timeout_seconds
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    async def complete(self, prompt: str) -> str:
        """Send the prompt and return the raw reply text.

        Raises:
            ClassifierUnavailableError: On any client, transport or API error
        """
        try:
            client = self._get_client()
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as exc:
            logger.error(
                "Classifier call failed",
                extra={"error_type": type(exc).__name__, "model": self.model},
            )
            raise ClassifierUnavailableError(
                details={"error_type": type(exc).__name__, "model": self.model}
            ) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
