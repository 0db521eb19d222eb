"""Validation of classifier replies.

The LLM answers with loosely structured text. ``parse_reply`` turns it into
a ``ClassificationOutcome`` that always points at a category of the supplied
catalog:

- valid reply: taken as is (confidence clamped to [0, 1])
- reply names a category outside the catalog: catch-all, confidence 0.5
- reply can't be parsed at all: catch-all, confidence 0.3
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, ValidationError

from home_budget.models.category import Category

UNKNOWN_CATEGORY_CONFIDENCE = 0.5
UNPARSABLE_CONFIDENCE = 0.3
DISPLAY_NAME_MAX = 50
DESCRIPTION_MAX = 200


class ReplyStatus(str, Enum):
    OK = "ok"
    UNKNOWN_CATEGORY = "unknown_category"
    UNPARSABLE = "unparsable"


class ClassifierReply(BaseModel):
    """Shape the classifier is asked to answer with."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    category_id: str
    confidence: float
    display_name: str
    description: str


@dataclass(frozen=True)
class ClassificationOutcome:
    category_id: UUID
    confidence: float
    display_name: str
    description: str
    status: ReplyStatus


def find_catch_all(categories: Sequence[Category], catch_all_name: str) -> Category | None:
    """Category whose name matches ``catch_all_name`` (case-insensitive)."""
    wanted = catch_all_name.casefold()
    for category in categories:
        if category.name.casefold() == wanted:
            return category
    return None


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_reply(
    raw_reply: str,
    categories: Sequence[Category],
    raw_description: str,
    catch_all_name: str = "Other",
) -> ClassificationOutcome:
    """Validate a raw classifier reply against the category catalog.

    Args:
        raw_reply: Reply text exactly as returned by the backend
        categories: Non-empty catalog the classifier was offered
        raw_description: Transaction description, used for fallback names
        catch_all_name: Name of the designated fallback category

    Returns:
        Outcome whose ``category_id`` is always one of ``categories``
    """
    if not categories:
        raise ValueError("categories must not be empty")

    fallback = find_catch_all(categories, catch_all_name) or categories[0]

    try:
        reply = ClassifierReply.model_validate(json.loads(_strip_code_fence(raw_reply or "")))
    except (json.JSONDecodeError, ValidationError, TypeError):
        return ClassificationOutcome(
            category_id=fallback.id,
            confidence=UNPARSABLE_CONFIDENCE,
            display_name=raw_description[:DISPLAY_NAME_MAX],
            description=raw_description[:DESCRIPTION_MAX],
            status=ReplyStatus.UNPARSABLE,
        )

    by_id = {str(c.id).lower(): c for c in categories}
    chosen = by_id.get(reply.category_id.lower())
    display_name = reply.display_name[:DISPLAY_NAME_MAX]
    description = reply.description[:DESCRIPTION_MAX]

    if chosen is None:
        return ClassificationOutcome(
            category_id=fallback.id,
            confidence=UNKNOWN_CATEGORY_CONFIDENCE,
            display_name=display_name,
            description=description,
            status=ReplyStatus.UNKNOWN_CATEGORY,
        )

    return ClassificationOutcome(
        category_id=chosen.id,
        confidence=min(max(reply.confidence, 0.0), 1.0),
        display_name=display_name,
        description=description,
        status=ReplyStatus.OK,
    )
