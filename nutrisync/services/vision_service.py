"""GPT-Vision 영양 라벨/음식 사진 분석 서비스"""
import json
import logging
import re
from functools import lru_cache
from typing import Optional, Type, TypeVar

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from nutrisync.api.v1.schemas.scan import FoodPhotoResult, LabelScanResult
from nutrisync.core.config import get_settings
from nutrisync.core.exceptions import AIResponseValidationError, ConfigurationError, ExternalServiceError

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)

_FENCE_START = re.compile(r"^```(?:json)?\s*\n?")
_FENCE_END = re.compile(r"\n?```\s*$")

LABEL_PROMPT = """Extract all nutrition information from this food label image.
Return ONLY valid JSON (no markdown, no backticks, no explanation):
{
  "food_name": "string - the product name if visible, otherwise describe the food",
  "serving_size": "string - the serving size as written on the label",
  "calories": number,
  "protein_g": number,
  "carbs_g": number,
  "fat_g": number,
  "fiber_g": number or null if not visible,
  "sugar_g": number or null if not visible,
  "sodium_mg": number or null if not visible
}
If a value is not visible on the label, use null.
All numeric values should be per single serving."""

PHOTO_PROMPT = """Identify all food items visible in this photo. For each item, estimate the portion size and nutritional content.

Return ONLY valid JSON (no markdown, no backticks, no explanation):
{
  "items": [
    {
      "food_name": "string - name of the food item",
      "estimated_portion": "string - estimated portion size (e.g. '1 cup', '200g', '1 medium slice')",
      "confidence": "low" | "medium" | "high",
      "calories": number,
      "protein_g": number,
      "carbs_g": number,
      "fat_g": number,
      "fiber_g": number or null,
      "sugar_g": number or null,
      "sodium_mg": number or null
    }
  ]
}

Guidelines:
- List EVERY distinct food item you can see (e.g. rice, chicken, salad separately)
- Estimate portions based on visual cues (plate size, utensils, known food proportions)
- Set confidence to "high" for clearly identifiable foods with standard portions, "medium" for foods you can identify but portions are uncertain, "low" for foods you're guessing at
- All nutritional values should be for the estimated portion size
- If you cannot identify any food items, return {"items": []}"""


def strip_markdown_fences(text: str) -> str:
    """```json ... ``` 로 감싼 응답에서 본문만 추출"""
    trimmed = text.strip()
    if trimmed.startswith("```"):
        return _FENCE_END.sub("", _FENCE_START.sub("", trimmed))
    return trimmed


def parse_ai_response(text: Optional[str], model: Type[ResultT]) -> ResultT:
    """
    AI 응답 텍스트를 스키마로 검증

    Raises:
        AIResponseValidationError: 빈 응답, JSON 파싱 실패, 스키마 불일치
    """
    if not text:
        raise AIResponseValidationError("AI 서비스가 빈 응답을 반환했습니다.")
    try:
        payload = json.loads(strip_markdown_fences(text))
        return model.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("AI response rejected (%s): %s", model.__name__, text[:300])
        raise AIResponseValidationError(f"AI 응답 형식이 올바르지 않습니다: {exc}") from exc


class GPTVisionService:
    """GPT-Vision 분석 (라벨 스캔, 음식 사진)"""

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4o") -> None:
        self.client = client
        self.model = model

    async def _complete(self, prompt: str, image_base64: str, media_type: str) -> Optional[str]:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {
                                "type": "image_url",
                                "image_url": {
                                    "url": f"data:{media_type};base64,{image_base64}",
                                    "detail": "high",
                                },
                            },
                        ],
                    }
                ],
                max_tokens=1500,
                temperature=0.2,
            )
        except OpenAIError as exc:
            logger.error("GPT-Vision request failed: %s", exc)
            raise ExternalServiceError(f"GPT-Vision 분석 중 오류 발생: {exc}") from exc

        return response.choices[0].message.content

    async def scan_nutrition_label(self, image_base64: str, media_type: str = "image/jpeg") -> LabelScanResult:
        text = await self._complete(LABEL_PROMPT, image_base64, media_type)
        return parse_ai_response(text, LabelScanResult)

    async def analyze_food_photo(self, image_base64: str, media_type: str = "image/jpeg") -> FoodPhotoResult:
        text = await self._complete(PHOTO_PROMPT, image_base64, media_type)
        return parse_ai_response(text, FoodPhotoResult)


@lru_cache
def get_vision_service() -> GPTVisionService:
    settings = get_settings()
    if not settings.openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY 환경 변수가 필요합니다.")
    return GPTVisionService(
        AsyncOpenAI(api_key=settings.openai_api_key, timeout=settings.http_timeout_seconds),
        model=settings.openai_model,
    )
