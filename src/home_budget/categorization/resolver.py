"""Categorization resolver.

Decides the category of one transaction:
1. Learned rule for the counterparty account (deterministic, no network)
2. LLM classifier over the full category catalog, with the reply validated
   against the catalog
3. Every classifier call is written to the audit log; a failing audit write
   never changes the result
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.categorization.classifier import Classifier, build_prompt
from home_budget.categorization.keys import normalize_account
from home_budget.categorization.reply import (
    DESCRIPTION_MAX,
    DISPLAY_NAME_MAX,
    ClassificationOutcome,
    parse_reply,
)
from home_budget.config import settings
from home_budget.core.exceptions import (
    CategoryNotFoundError,
    MissingCounterpartyError,
    NoCategoriesError,
)
from home_budget.models.ai_categorization_log import AiCategorizationLog
from home_budget.repositories.ai_categorization_log import AiCategorizationLogRepository
from home_budget.repositories.categorization_rule import CategorizationRuleRepository
from home_budget.repositories.category import CategoryRepository
from home_budget.repositories.transaction import TransactionRepository

logger = logging.getLogger(__name__)


@dataclass
class CategorizationInput:
    raw_description: str
    amount: Decimal
    transaction_date: date
    counterparty_name: str | None = None
    counterparty_account: str | None = None
    # Links the audit row to a stored transaction when there is one.
    transaction_id: UUID | None = None


@dataclass
class CategorizationResult:
    category_id: UUID
    category_source: str
    display_name: str
    description: str
    confidence: float | None = None


@dataclass
class PromotionResult:
    rule_id: UUID
    counterparty_account: str
    category_id: UUID
    updated_transactions_count: int


class CategorizationResolver:
    """Resolve categories for incoming transactions.

    ``classifier`` is ``OpenAIClassifier`` in production and a fake in tests.
    """

    def __init__(
        self, db: AsyncSession, classifier: Classifier, catch_all_name: str | None = None
    ):
        self.db = db
        self.classifier = classifier
        self.catch_all_name = catch_all_name or settings.catch_all_category_name
        self.category_repo = CategoryRepository(db)
        self.rule_repo = CategorizationRuleRepository(db)
        self.log_repo = AiCategorizationLogRepository(db)
        self.transaction_repo = TransactionRepository(db)

    async def resolve(self, txn: CategorizationInput) -> CategorizationResult:
        """Categorize one transaction.

        Raises:
            NoCategoriesError: The catalog is empty (AI path only)
            ClassifierUnavailableError: The classifier backend failed
        """
        raw_description = txn.raw_description or ""

        account = normalize_account(txn.counterparty_account)
        if account:
            rule = await self.rule_repo.get_by_account(account)
            if rule:
                logger.debug("Rule hit", extra={"rule_id": str(rule.id)})
                return CategorizationResult(
                    category_id=rule.category_id,
                    category_source="rule",
                    display_name=txn.counterparty_name or raw_description[:DISPLAY_NAME_MAX],
                    description=txn.counterparty_name or raw_description[:DESCRIPTION_MAX],
                )

        categories = await self.category_repo.list_ordered()
        if not categories:
            raise NoCategoriesError()

        prompt = build_prompt(
            raw_description,
            txn.amount,
            txn.transaction_date,
            txn.counterparty_name,
            categories,
        )
        raw_reply = await self.classifier.complete(prompt)
        outcome = parse_reply(raw_reply, categories, raw_description, self.catch_all_name)

        await self._write_audit(txn.transaction_id, prompt, raw_reply, outcome)

        return CategorizationResult(
            category_id=outcome.category_id,
            category_source="ai",
            display_name=outcome.display_name,
            description=outcome.description,
            confidence=outcome.confidence,
        )

    async def _write_audit(
        self,
        transaction_id: UUID | None,
        prompt: str,
        raw_reply: str,
        outcome: ClassificationOutcome,
    ) -> None:
        row = AiCategorizationLog(
            transaction_id=transaction_id,
            prompt=prompt,
            response=raw_reply,
            category_id=outcome.category_id,
            confidence=outcome.confidence,
        )
        # Only the savepoint is undone on failure; the caller commits the row
        # together with its own writes.
        try:
            async with self.db.begin_nested():
                await self.log_repo.create(row, commit=False)
        except SQLAlchemyError as exc:
            logger.warning(
                "Failed to write AI categorization log",
                extra={"error_type": type(exc).__name__, "reply_status": outcome.status.value},
            )

    async def promote_rule(self, counterparty_account: str, category_id: UUID) -> PromotionResult:
        """Learn a rule for a counterparty and apply it to its history.

        The rule upsert and the bulk recategorization share one database
        transaction. The bulk update is idempotent, so re-running the call
        repairs any earlier failure.

        Raises:
            CategoryNotFoundError: ``category_id`` does not exist
            MissingCounterpartyError: ``counterparty_account`` is blank
        """
        account = normalize_account(counterparty_account)
        if not account:
            raise MissingCounterpartyError()

        if await self.category_repo.get_by_id(category_id) is None:
            raise CategoryNotFoundError(details={"category_id": str(category_id)})

        try:
            rule = await self.rule_repo.upsert(account, category_id)
            updated = await self.transaction_repo.recategorize_by_account(account, category_id)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info(
            "Categorization rule promoted",
            extra={"rule_id": str(rule.id), "updated_transactions": updated},
        )
        return PromotionResult(
            rule_id=rule.id,
            counterparty_account=account,
            category_id=category_id,
            updated_transactions_count=updated,
        )

