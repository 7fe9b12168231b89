"""일일 목표 저장소 - 소유자당 한 행"""
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import select, update
from sqlalchemy.dialects.sqlite import insert

from nutrisync.local.models import LocalDailyGoal
from nutrisync.local.repositories.base import Repository
from nutrisync.utils.time import utcnow

DEFAULT_GOALS = {
    "calories": 2000,
    "protein_g": 150,
    "carbs_g": 200,
    "fat_g": 67,
    "fiber_g": 30,
    "sugar_g": 50,
    "sodium_mg": 2300,
}


class DailyGoalUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    calories: Optional[float] = None
    protein_g: Optional[float] = None
    carbs_g: Optional[float] = None
    fat_g: Optional[float] = None
    fiber_g: Optional[float] = None
    sugar_g: Optional[float] = None
    sodium_mg: Optional[float] = None


class GoalRepository(Repository):

    async def get(self) -> LocalDailyGoal:
        """
        소유자의 목표 조회

        행이 없으면 기본값으로 만든다. user_id 유니크 인덱스 때문에 동시에 호출돼도 한 행만 남는다.
        """
        now = utcnow()
        async with self.store.session() as session:
            await session.execute(
                insert(LocalDailyGoal)
                .values(
                    id=str(uuid.uuid4()),
                    user_id=self.owner_id,
                    created_at=now,
                    updated_at=now,
                    **DEFAULT_GOALS,
                )
                .on_conflict_do_nothing(index_elements=["user_id"])
            )
            await session.commit()

            result = await session.execute(
                select(LocalDailyGoal).where(LocalDailyGoal.user_id == self.owner_id)
            )
            return result.scalar_one()

    async def update(self, changes: DailyGoalUpdate) -> LocalDailyGoal:
        await self.get()
        values = changes.model_dump(exclude_unset=True)
        values["updated_at"] = utcnow()

        async with self.store.session() as session:
            await session.execute(
                update(LocalDailyGoal)
                .where(LocalDailyGoal.user_id == self.owner_id)
                .values(**values)
            )
            await session.commit()
        return await self.get()
