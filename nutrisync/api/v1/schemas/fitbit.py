"""Fitbit 연동 스키마"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from nutrisync.utils.enums import FitbitConnectionState


class FitbitStatusResponse(BaseModel):
    state: FitbitConnectionState
    fitbit_user_id: Optional[str] = None
    expires_at: Optional[datetime] = None


class FitbitAuthorizeResponse(BaseModel):
    authorization_url: str


class FitbitConnectRequest(BaseModel):
    code: str = Field(..., min_length=1)
    state: Optional[str] = None


class FitbitPushRequest(BaseModel):
    """Fitbit으로 보낼 음식 기록 id 목록 (선택 순서대로 처리)"""

    log_ids: List[str] = Field(default_factory=list, max_length=200)


class FitbitPushResponse(BaseModel):
    pushed: List[str] = Field(default_factory=list)
    failed: int = 0
