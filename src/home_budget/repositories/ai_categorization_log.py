"""Repository for the AI categorization audit trail."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.models.ai_categorization_log import AiCategorizationLog
from home_budget.repositories.base import BaseRepository


class AiCategorizationLogRepository(BaseRepository[AiCategorizationLog]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, AiCategorizationLog)

    async def get_recent(self, limit: int = 50) -> list[AiCategorizationLog]:
        result = await self.db.execute(
            select(AiCategorizationLog)
            .order_by(AiCategorizationLog.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
