"""공통 스키마"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    외부 API 릴레이 응답 래퍼 (바코드 조회, AI 분석)

    조회 결과가 없는 경우도 success=True, data=None 으로 응답한다.
    오류는 HTTP 상태 코드로 전달하므로 error는 클라이언트 표시용 보조 필드.
    """

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None, message: Optional[str] = None) -> "ApiResponse[T]":
        return cls(success=True, data=data, message=message)
