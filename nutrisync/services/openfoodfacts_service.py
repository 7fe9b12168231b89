"""OpenFoodFacts 바코드 조회 서비스"""
import logging
from typing import Any, Optional

import httpx

from nutrisync.api.v1.schemas.barcode import BarcodeProduct
from nutrisync.core.exceptions import ExternalServiceError
from nutrisync.utils.macros import round_1, round_half_up

logger = logging.getLogger(__name__)

SALT_TO_SODIUM_MG = 400  # salt(g) × 400 ≈ sodium(mg)


def _number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def normalize_product(barcode: str, product: dict) -> BarcodeProduct:
    """
    OpenFoodFacts product → BarcodeProduct

    energy-kcal_serving 값이 있으면 1회 제공량 기준, 없으면 100g 기준 값을 사용한다.
    나트륨은 sodium(g) × 1000, 없으면 salt(g) × 400 으로 환산.
    """
    nutriments = product.get("nutriments") or {}
    per_serving = _number(nutriments.get("energy-kcal_serving")) is not None
    suffix = "_serving" if per_serving else "_100g"

    def nutrient(name: str) -> Optional[float]:
        return _number(nutriments.get(f"{name}{suffix}"))

    sodium_mg: Optional[int] = None
    sodium_g = nutrient("sodium")
    salt_g = nutrient("salt")
    if sodium_g is not None:
        sodium_mg = round_half_up(sodium_g * 1000)
    elif salt_g is not None:
        sodium_mg = round_half_up(salt_g * SALT_TO_SODIUM_MG)

    food_name = product.get("product_name") or "Unknown Product"
    brand = product.get("brands") or None

    return BarcodeProduct(
        barcode=barcode,
        food_name=f"{food_name} ({brand})" if brand else food_name,
        brand=brand,
        serving_size=(product.get("serving_size") or "100g") if per_serving else "100g",
        calories=round_half_up(nutrient("energy-kcal") or 0),
        protein_g=round_1(nutrient("proteins") or 0),
        carbs_g=round_1(nutrient("carbohydrates") or 0),
        fat_g=round_1(nutrient("fat") or 0),
        fiber_g=round_1(nutrient("fiber")),
        sugar_g=round_1(nutrient("sugars")),
        sodium_mg=sodium_mg,
        image_url=product.get("image_front_small_url") or None,
    )


class OpenFoodFactsService:

    def __init__(
        self,
        base_url: str = "https://world.openfoodfacts.org/api/v2",
        user_agent: str = "nutrisync/0.1 (health tracking app)",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self._transport = transport

    async def lookup_barcode(self, barcode: str) -> Optional[BarcodeProduct]:
        """
        바코드로 제품 조회

        Returns:
            정규화된 제품 정보, 등록되지 않은 바코드면 None

        Raises:
            ExternalServiceError: 네트워크 오류 또는 404 이외의 오류 응답
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers={"User-Agent": self.user_agent},
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            ) as client:
                response = await client.get(f"/product/{barcode}.json")
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"OpenFoodFacts request failed: {exc!r}") from exc

        if response.status_code == 404:
            return None
        if response.is_error:
            raise ExternalServiceError(f"OpenFoodFacts returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise ExternalServiceError("OpenFoodFacts returned invalid JSON") from exc

        product = data.get("product")
        if data.get("status") != 1 or not product:
            logger.info("Barcode %s not found in OpenFoodFacts", barcode)
            return None

        return normalize_product(barcode, product)
