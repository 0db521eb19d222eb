"""Transaction write workflows: manual entry, edits and bulk clear."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.categorization.classifier import Classifier
from home_budget.categorization.keys import (
    is_internal_transfer,
    normalize_account,
    normalize_merchant,
)
from home_budget.categorization.resolver import CategorizationInput, CategorizationResolver
from home_budget.config import settings
from home_budget.core.exceptions import (
    CategoryNotFoundError,
    MissingCounterpartyError,
    TransactionNotFoundError,
)
from home_budget.models.transaction import Transaction
from home_budget.repositories.category import CategoryRepository
from home_budget.repositories.transaction import TransactionRepository
from home_budget.schemas.transaction import TransactionCreate, TransactionUpdate

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(self, db: AsyncSession, classifier: Classifier | None = None):
        self.db = db
        self.classifier = classifier
        self.transaction_repo = TransactionRepository(db)
        self.category_repo = CategoryRepository(db)

    async def create_manual(
        self, payload: TransactionCreate, own_ibans: list[str] | None = None
    ) -> Transaction:
        """Store a manually entered transaction.

        A supplied category is stored with source ``user``; otherwise the
        transaction is categorized by the resolver first. Transfers to one of
        ``own_ibans`` are stored as ignored.

        Raises:
            CategoryNotFoundError: Supplied category does not exist
            NoCategoriesError, ClassifierUnavailableError: From the resolver
        """
        account = normalize_account(payload.counterparty_account)
        display_name = payload.description
        description = payload.description

        if payload.category_id is not None:
            if await self.category_repo.get_by_id(payload.category_id) is None:
                raise CategoryNotFoundError(details={"category_id": str(payload.category_id)})
            category_id = payload.category_id
            category_source = "user"
        else:
            resolver = CategorizationResolver(self.db, self.classifier)
            result = await resolver.resolve(
                CategorizationInput(
                    raw_description=payload.description,
                    amount=payload.amount,
                    transaction_date=payload.transaction_date,
                    counterparty_name=payload.counterparty_name,
                    counterparty_account=account,
                )
            )
            category_id = result.category_id
            category_source = result.category_source
            display_name = result.display_name
            description = result.description

        txn = Transaction(
            raw_description=payload.description,
            display_name=display_name,
            description=description,
            amount=payload.amount,
            currency=(payload.currency or settings.default_currency).upper(),
            transaction_date=payload.transaction_date,
            booking_date=payload.transaction_date,
            counterparty_name=payload.counterparty_name,
            counterparty_account=account,
            merchant_key=normalize_merchant(payload.counterparty_name or payload.description),
            category_id=category_id,
            category_source=category_source,
            is_manual=True,
            is_income=payload.is_income,
            is_ignored=is_internal_transfer(account, own_ibans or []),
        )
        txn = await self.transaction_repo.create(txn)
        logger.info(
            "Manual transaction created",
            extra={"transaction_id": str(txn.id), "category_source": category_source},
        )
        return txn

    async def update(
        self, transaction_id: UUID, payload: TransactionUpdate
    ) -> tuple[Transaction, bool, int]:
        """Apply user edits; optionally learn a rule from a category change.

        Returns:
            (transaction, rule_created, updated_transactions_count)

        Raises:
            TransactionNotFoundError: Unknown transaction
            CategoryNotFoundError: Unknown category
            MissingCounterpartyError: Rule requested for a transaction without
                a counterparty account
        """
        txn = await self.transaction_repo.get_by_id(transaction_id)
        if txn is None:
            raise TransactionNotFoundError(details={"transaction_id": str(transaction_id)})

        data = payload.model_dump(
            exclude_unset=True, exclude={"create_rule", "apply_rule_to_existing"}
        )
        if "category_id" in data:
            if data["category_id"] is not None and (
                await self.category_repo.get_by_id(data["category_id"]) is None
            ):
                raise CategoryNotFoundError(details={"category_id": str(data["category_id"])})
            data["category_source"] = "user" if data["category_id"] is not None else None

        wants_rule = payload.create_rule and payload.category_id is not None
        if wants_rule and not txn.counterparty_account:
            raise MissingCounterpartyError(details={"transaction_id": str(transaction_id)})

        # With a rule requested, the edit commits together with the rule.
        txn = await self.transaction_repo.update(transaction_id, data, commit=not wants_rule)

        rule_created = False
        updated = 0
        if wants_rule:
            resolver = CategorizationResolver(self.db, self.classifier)
            if payload.apply_rule_to_existing:
                promotion = await resolver.promote_rule(
                    txn.counterparty_account, payload.category_id
                )
                updated = promotion.updated_transactions_count
            else:
                await resolver.rule_repo.upsert(
                    normalize_account(txn.counterparty_account), payload.category_id
                )
                await self.db.commit()
            rule_created = True
            # The edited row itself may have been moved to source "rule".
            await self.db.refresh(txn)

        return txn, rule_created, updated

    async def delete(self, transaction_id: UUID) -> None:
        if not await self.transaction_repo.delete(transaction_id):
            raise TransactionNotFoundError(details={"transaction_id": str(transaction_id)})

    async def clear_all(self) -> int:
        deleted = await self.transaction_repo.delete_all()
        logger.warning("All transactions deleted", extra={"deleted_count": deleted})
        return deleted
