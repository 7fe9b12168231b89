"""로컬 동기화 클라이언트 실행

    python -m nutrisync.local          # 주기 동기화 상주
    python -m nutrisync.local --once   # 한 번 동기화 후 종료
"""
import argparse
import asyncio
import logging

from dotenv import load_dotenv

load_dotenv()

from nutrisync.core.config import get_settings
from nutrisync.core.log_config import configure_logging
from nutrisync.local.runtime import LocalRuntime

logger = logging.getLogger(__name__)


async def run(once: bool) -> None:
    runtime = LocalRuntime()
    await runtime.start(schedule=not once)
    try:
        if once:
            results = await runtime.foreground()
            for name, outcome in results.items():
                logger.info("%s: %s", name, outcome)
            return
        # 종료 신호가 올 때까지 대기
        await asyncio.Event().wait()
    finally:
        await runtime.stop()


def main() -> None:
    parser = argparse.ArgumentParser(prog="nutrisync.local", description="nutrisync local sync client")
    parser.add_argument("--once", action="store_true", help="run every sync job once and exit")
    args = parser.parse_args()

    configure_logging(get_settings().log_level)
    try:
        asyncio.run(run(args.once))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
