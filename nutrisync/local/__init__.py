"""로컬 우선 저장소와 동기화 클라이언트"""
from nutrisync.local.runtime import LocalRuntime
from nutrisync.local.store import LocalStore

__all__ = ["LocalRuntime", "LocalStore"]
