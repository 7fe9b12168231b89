from nutrisync.local.store import LocalStore


class Repository:
    """소유자 범위로 묶인 로컬 저장소 접근 기본 클래스"""

    def __init__(self, store: LocalStore, owner_id: str) -> None:
        self.store = store
        self.owner_id = owner_id
