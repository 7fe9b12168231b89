"""바코드 조회 - 로컬 카탈로그 우선, 없으면 릴레이(OpenFoodFacts)"""
import logging
from typing import Optional

from nutrisync.api.v1.schemas.barcode import BarcodeProduct
from nutrisync.local.models import LocalFoodItem
from nutrisync.local.relay_client import RelayClient
from nutrisync.local.repositories.food_items import FoodItemCreate, FoodItemRepository
from nutrisync.utils.macros import round_1, round_half_up

logger = logging.getLogger(__name__)

MIN_BARCODE_LENGTH = 8
MAX_BARCODE_LENGTH = 14


def normalize_barcode(barcode: str) -> str:
    code = barcode.strip()
    if not MIN_BARCODE_LENGTH <= len(code) <= MAX_BARCODE_LENGTH:
        raise ValueError(f"Barcode must be {MIN_BARCODE_LENGTH}-{MAX_BARCODE_LENGTH} characters: {barcode!r}")
    return code


def product_from_item(item: LocalFoodItem) -> BarcodeProduct:
    return BarcodeProduct(
        barcode=item.barcode or "",
        food_name=item.name,
        brand=item.brand,
        serving_size=item.serving_size,
        calories=round_half_up(item.calories),
        protein_g=round_1(item.protein_g),
        carbs_g=round_1(item.carbs_g),
        fat_g=round_1(item.fat_g),
        fiber_g=round_1(item.fiber_g),
        sugar_g=round_1(item.sugar_g),
        sodium_mg=round_half_up(item.sodium_mg) if item.sodium_mg is not None else None,
    )


class BarcodeLookup:

    def __init__(self, food_items: FoodItemRepository, client: RelayClient) -> None:
        self.food_items = food_items
        self.client = client

    async def lookup(self, barcode: str) -> Optional[BarcodeProduct]:
        """
        바코드로 제품 조회

        Raises:
            ValueError: 길이가 8~14자가 아님
            RelayError: 릴레이 호출 실패 (사용자 화면에서 처리)
        """
        code = normalize_barcode(barcode)

        cached = await self.food_items.find_by_barcode(code)
        if cached is not None:
            logger.debug("Barcode %s found in local catalog", code)
            return product_from_item(cached)

        return await self.client.lookup_barcode(code)

    async def remember(self, product: BarcodeProduct) -> LocalFoodItem:
        """조회한 제품을 로컬 카탈로그에 저장"""
        return await self.food_items.save(
            FoodItemCreate(
                barcode=product.barcode,
                name=product.food_name,
                brand=product.brand,
                calories=product.calories,
                protein_g=product.protein_g,
                carbs_g=product.carbs_g,
                fat_g=product.fat_g,
                fiber_g=product.fiber_g,
                sugar_g=product.sugar_g,
                sodium_mg=product.sodium_mg,
                serving_size=product.serving_size,
            )
        )
