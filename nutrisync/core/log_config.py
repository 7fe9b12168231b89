"""로그 설정 - 릴레이 서버와 로컬 동기화 클라이언트 공용"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO", sql_echo: bool = False) -> None:
    """
    루트 로거 설정

    sql_echo=True면 SQLAlchemy 엔진 로그를 쿼리 사이 빈 줄을 넣어 별도 핸들러로 출력한다.
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, datefmt=DATE_FORMAT)

    sql_logger = logging.getLogger("sqlalchemy.engine")
    sql_logger.setLevel(logging.INFO if sql_echo else logging.WARNING)
    sql_logger.handlers.clear()
    if not sql_echo:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(f"{LOG_FORMAT}\n", datefmt=DATE_FORMAT))
    sql_logger.addHandler(handler)
    sql_logger.propagate = False
