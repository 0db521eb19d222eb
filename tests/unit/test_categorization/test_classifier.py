"""Unit tests for prompt building and the OpenAI backend wrapper."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import httpx
import pytest
from openai import APIConnectionError

from home_budget.categorization.classifier import Classifier, OpenAIClassifier, build_prompt
from home_budget.core.exceptions import ClassifierUnavailableError
from home_budget.models.category import Category


def test_build_prompt_lists_every_category_with_id():
    categories = [
        Category(id=uuid4(), name="Groceries", color="#16a34a", ai_prompt="Food shops"),
        Category(id=uuid4(), name="Other", color="#64748b"),
    ]

    prompt = build_prompt(
        "LIDL SP Z OO", Decimal("-54.20"), date(2024, 5, 3), "Lidl", categories
    )

    assert "LIDL SP Z OO" in prompt
    assert "-54.20" in prompt
    assert "2024-05-03" in prompt
    assert f"Groceries (ID: {categories[0].id}): Food shops" in prompt
    assert f"Other (ID: {categories[1].id}): No description" in prompt
    assert '"category_id"' in prompt


def test_build_prompt_without_counterparty():
    prompt = build_prompt("ATM", Decimal("100"), date(2024, 5, 3), None, [])

    assert "Counterparty: Unknown" in prompt


def _client_returning(response) -> Mock:
    client = Mock()
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


@pytest.mark.asyncio
async def test_complete_returns_message_content():
    classifier = OpenAIClassifier(api_key="test-key")
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content='{"category_id": "x"}'))]
    )
    classifier._client = _client_returning(response)

    assert await classifier.complete("prompt") == '{"category_id": "x"}'


@pytest.mark.asyncio
async def test_complete_without_choices_returns_empty_string():
    classifier = OpenAIClassifier(api_key="test-key")
    classifier._client = _client_returning(SimpleNamespace(choices=[]))

    assert await classifier.complete("prompt") == ""


@pytest.mark.asyncio
async def test_complete_wraps_backend_errors():
    classifier = OpenAIClassifier(api_key="test-key")
    client = Mock()
    client.chat.completions.create = AsyncMock(
        side_effect=APIConnectionError(request=httpx.Request("POST", "https://api.openai.com"))
    )
    classifier._client = client

    with pytest.raises(ClassifierUnavailableError) as exc_info:
        await classifier.complete("prompt")

    assert exc_info.value.error_code == "CAT_002"
    assert exc_info.value.http_status == 502


def test_backends_satisfy_classifier_protocol(fake_classifier):
    assert isinstance(OpenAIClassifier(), Classifier)
    assert isinstance(fake_classifier, Classifier)
    assert not isinstance(object(), Classifier)
