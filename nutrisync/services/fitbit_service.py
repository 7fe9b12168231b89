"""Fitbit Web API 클라이언트 (OAuth2 + 음식 기록)"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional
from urllib.parse import urlencode

import httpx

from nutrisync.core.config import Settings
from nutrisync.core.exceptions import ConfigurationError, FitbitError

logger = logging.getLogger(__name__)

FITBIT_SCOPE = "nutrition profile"
CALORIES_UNIT_ID = 304  # Fitbit 단위 "calories"

MEAL_TYPE_TO_FITBIT_ID = {
    "breakfast": 1,
    "lunch": 3,
    "dinner": 5,
    "snack": 7,
}
ANYTIME_MEAL_ID = 7


def meal_type_to_fitbit_id(meal_type: str) -> int:
    """식사 유형 → Fitbit mealTypeId (알 수 없는 값은 7=Anytime)"""
    return MEAL_TYPE_TO_FITBIT_ID.get(meal_type, ANYTIME_MEAL_ID)


def format_amount(value: float) -> str:
    """소수점 표기 그대로 (지수 표기 없이, 불필요한 0 제거)"""
    text = format(value, "f")
    return text.rstrip("0").rstrip(".") if "." in text else text


@dataclass
class FitbitTokens:
    access_token: str
    refresh_token: str
    expires_in: int
    user_id: str

    @classmethod
    def from_response(cls, payload: dict) -> "FitbitTokens":
        try:
            return cls(
                access_token=payload["access_token"],
                refresh_token=payload["refresh_token"],
                expires_in=int(payload["expires_in"]),
                user_id=str(payload["user_id"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise FitbitError(f"Unexpected Fitbit token response: {exc}") from exc


class FitbitService:
    """Fitbit OAuth 및 음식 기록 API"""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        auth_url: str = "https://www.fitbit.com/oauth2/authorize",
        api_base_url: str = "https://api.fitbit.com",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.auth_url = auth_url
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "FitbitService":
        if not settings.fitbit_configured:
            raise ConfigurationError("FITBIT_CLIENT_ID / FITBIT_CLIENT_SECRET 환경 변수가 필요합니다.")
        return cls(
            client_id=settings.fitbit_client_id,
            client_secret=settings.fitbit_client_secret,
            redirect_uri=settings.fitbit_redirect_uri,
            auth_url=settings.fitbit_auth_url,
            api_base_url=settings.fitbit_api_base_url,
            timeout=settings.http_timeout_seconds,
            transport=transport,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_base_url,
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        )

    async def _call(self, action: str, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise FitbitError(f"Fitbit {action} failed: {exc!r}") from exc

        if response.is_error:
            raise FitbitError(f"Fitbit {action} failed ({response.status_code}): {response.text[:200]}")
        return response

    def get_authorization_url(self, state: str) -> str:
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": FITBIT_SCOPE,
            "state": state,
        }
        return f"{self.auth_url}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> FitbitTokens:
        """authorization code → 토큰"""
        response = await self._call(
            "token exchange",
            "POST",
            "/oauth2/token",
            auth=httpx.BasicAuth(self.client_id, self.client_secret),
            data={
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": self.redirect_uri,
            },
        )
        return FitbitTokens.from_response(response.json())

    async def refresh_tokens(self, refresh_token: str) -> FitbitTokens:
        response = await self._call(
            "token refresh",
            "POST",
            "/oauth2/token",
            auth=httpx.BasicAuth(self.client_id, self.client_secret),
            data={"grant_type": "refresh_token", "refresh_token": refresh_token},
        )
        return FitbitTokens.from_response(response.json())

    async def get_profile(self, access_token: str) -> dict:
        response = await self._call(
            "profile",
            "GET",
            "/1/user/-/profile.json",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return response.json().get("user", {})

    async def log_food(
        self,
        access_token: str,
        food_name: str,
        meal_type_id: int,
        calories: float,
        day: date,
    ) -> None:
        """
        Fitbit 음식 기록 생성

        칼로리 단위(unitId=304)로 amount=칼로리를 기록한다.
        """
        params = {
            "foodName": food_name,
            "mealTypeId": str(meal_type_id),
            "unitId": str(CALORIES_UNIT_ID),
            "amount": format_amount(calories),
            "date": day.isoformat(),
        }
        await self._call(
            "food log",
            "POST",
            "/1/user/-/foods/log.json",
            params=params,
            headers={"Authorization": f"Bearer {access_token}"},
        )
