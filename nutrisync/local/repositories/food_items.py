"""음식 카탈로그 저장소 - food_database 테이블 (최근/즐겨찾기/검색)"""
import uuid
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy import or_, select, update

from nutrisync.local.models import LocalFoodItem
from nutrisync.local.repositories.base import Repository
from nutrisync.utils.time import utcnow


class FoodItemCreate(BaseModel):
    barcode: Optional[str] = None
    name: str
    brand: Optional[str] = None
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: Optional[float] = None
    sugar_g: Optional[float] = None
    sodium_mg: Optional[float] = None
    serving_size: str = "1 serving"
    is_favorite: bool = False


class FoodItemRepository(Repository):

    async def save(self, data: FoodItemCreate) -> LocalFoodItem:
        now = utcnow()
        item = LocalFoodItem(
            id=str(uuid.uuid4()),
            user_id=self.owner_id,
            use_count=0,
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        async with self.store.session() as session:
            session.add(item)
            await session.commit()
        return item

    async def get(self, item_id: str) -> Optional[LocalFoodItem]:
        async with self.store.session() as session:
            result = await session.execute(
                select(LocalFoodItem).where(
                    LocalFoodItem.id == item_id,
                    LocalFoodItem.user_id == self.owner_id,
                )
            )
            return result.scalar_one_or_none()

    async def get_recent(self, limit: int = 20) -> List[LocalFoodItem]:
        """최근 수정/사용 순"""
        async with self.store.session() as session:
            result = await session.execute(
                select(LocalFoodItem)
                .where(LocalFoodItem.user_id == self.owner_id)
                .order_by(LocalFoodItem.updated_at.desc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def get_favorites(self) -> List[LocalFoodItem]:
        async with self.store.session() as session:
            result = await session.execute(
                select(LocalFoodItem)
                .where(LocalFoodItem.user_id == self.owner_id, LocalFoodItem.is_favorite.is_(True))
                .order_by(LocalFoodItem.use_count.desc())
            )
            return list(result.scalars().all())

    async def toggle_favorite(self, item_id: str, is_favorite: bool) -> None:
        async with self.store.session() as session:
            await session.execute(
                update(LocalFoodItem)
                .where(LocalFoodItem.id == item_id, LocalFoodItem.user_id == self.owner_id)
                .values(is_favorite=is_favorite, updated_at=utcnow())
            )
            await session.commit()

    async def increment_use_count(self, item_id: str) -> None:
        """사용 횟수 +1 (감소하지 않음), 최근 목록 정렬을 위해 updated_at 갱신"""
        async with self.store.session() as session:
            await session.execute(
                update(LocalFoodItem)
                .where(LocalFoodItem.id == item_id, LocalFoodItem.user_id == self.owner_id)
                .values(use_count=LocalFoodItem.use_count + 1, updated_at=utcnow())
            )
            await session.commit()

    async def search(self, query: str, limit: int = 50) -> List[LocalFoodItem]:
        """이름/브랜드 부분 일치 검색 (사용 횟수 순)"""
        pattern = f"%{query}%"
        async with self.store.session() as session:
            result = await session.execute(
                select(LocalFoodItem)
                .where(
                    LocalFoodItem.user_id == self.owner_id,
                    or_(LocalFoodItem.name.like(pattern), LocalFoodItem.brand.like(pattern)),
                )
                .order_by(LocalFoodItem.use_count.desc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def find_by_barcode(self, barcode: str) -> Optional[LocalFoodItem]:
        async with self.store.session() as session:
            result = await session.execute(
                select(LocalFoodItem)
                .where(LocalFoodItem.user_id == self.owner_id, LocalFoodItem.barcode == barcode)
                .order_by(LocalFoodItem.use_count.desc())
                .limit(1)
            )
            return result.scalars().first()
