"""음식 카탈로그 저장소 테스트"""
import pytest

from nutrisync.local.repositories.food_items import FoodItemCreate, FoodItemRepository

from helpers import OTHER_OWNER_ID, OWNER_ID


def _item(name: str, **overrides) -> FoodItemCreate:
    values = {"name": name, "calories": 120, "protein_g": 3, "carbs_g": 20, "fat_g": 2}
    values.update(overrides)
    return FoodItemCreate(**values)


@pytest.fixture
def repo(local_store) -> FoodItemRepository:
    return FoodItemRepository(local_store, OWNER_ID)


@pytest.mark.asyncio
async def test_save_defaults(repo):
    item = await repo.save(_item("Oatmeal"))

    stored = await repo.get(item.id)
    assert stored.serving_size == "1 serving"
    assert stored.use_count == 0
    assert stored.is_favorite is False


@pytest.mark.asyncio
async def test_increment_use_count_and_favorites_order(repo):
    oats = await repo.save(_item("Oatmeal", is_favorite=True))
    toast = await repo.save(_item("Toast"))
    banana = await repo.save(_item("Banana", is_favorite=True))

    for _ in range(3):
        await repo.increment_use_count(banana.id)
    await repo.increment_use_count(oats.id)
    await repo.toggle_favorite(toast.id, False)

    favorites = await repo.get_favorites()
    assert [item.name for item in favorites] == ["Banana", "Oatmeal"]
    assert (await repo.get(banana.id)).use_count == 3


@pytest.mark.asyncio
async def test_toggle_favorite(repo):
    item = await repo.save(_item("Almonds"))

    await repo.toggle_favorite(item.id, True)
    assert [fav.id for fav in await repo.get_favorites()] == [item.id]

    await repo.toggle_favorite(item.id, False)
    assert await repo.get_favorites() == []


@pytest.mark.asyncio
async def test_search_matches_name_or_brand(repo):
    await repo.save(_item("Protein Bar", brand="Quest"))
    await repo.save(_item("Chocolate Milk", brand="Fairlife"))
    await repo.save(_item("Apple"))

    assert [item.name for item in await repo.search("bar")] == ["Protein Bar"]
    assert [item.name for item in await repo.search("fair")] == ["Chocolate Milk"]
    assert await repo.search("pizza") == []


@pytest.mark.asyncio
async def test_get_recent_limit(repo):
    for i in range(5):
        await repo.save(_item(f"Food {i}"))

    assert len(await repo.get_recent(limit=3)) == 3


@pytest.mark.asyncio
async def test_find_by_barcode_is_owner_scoped(local_store, repo):
    await FoodItemRepository(local_store, OTHER_OWNER_ID).save(_item("Not mine", barcode="0123456789012"))
    mine = await repo.save(_item("Granola", barcode="5000112637922"))

    assert (await repo.find_by_barcode("5000112637922")).id == mine.id
    assert await repo.find_by_barcode("0123456789012") is None
