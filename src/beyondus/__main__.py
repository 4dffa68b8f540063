"""Main entry point for Beyond Us.

Runs either a headless bot session (useful for soak-testing the state
machine) or the HTTP/WebSocket session server.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv

from .bots import BotController
from .core.config import GameConfig
from .core.game_session import GameSession
from .utils.logger import setup_logger


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


def config_from_env() -> GameConfig:
    """Build a GameConfig from BEYONDUS_* environment variables."""
    defaults = GameConfig()
    return GameConfig(
        sabotage_units_required=_env_int("BEYONDUS_SABOTAGE_UNITS", defaults.sabotage_units_required),
        tie_break_method=os.getenv("BEYONDUS_TIE_BREAK", defaults.tie_break_method),
        bot_interval_min=_env_float("BEYONDUS_BOT_INTERVAL_MIN", defaults.bot_interval_min),
        bot_interval_max=_env_float("BEYONDUS_BOT_INTERVAL_MAX", defaults.bot_interval_max),
        seed=_env_int("BEYONDUS_SEED", None),
        verbose=os.getenv("BEYONDUS_VERBOSE", "1") != "0",
        save_to_file=os.getenv("BEYONDUS_LOG_TO_FILE", "0") == "1",
        log_dir=os.getenv("BEYONDUS_LOG_DIR", defaults.log_dir),
    )


async def run_headless(config: GameConfig, bots: int, duration: float) -> dict:
    """Fill a lobby with bots, play for ``duration`` seconds, return the final snapshot."""
    logger = logging.getLogger("beyondus.headless")

    session = GameSession(config)
    session.add_bots(bots)
    session.start()

    controller = BotController(session)
    controller.start()
    try:
        await asyncio.sleep(duration)
    finally:
        await controller.stop()
        controller.close()

    snapshot = session.snapshot()
    logger.info(
        f"Stopped after {duration:.0f}s: phase={snapshot['phase']} round={snapshot['round']} "
        f"sabotage={snapshot['sabotageUnitsCompleted']}/{snapshot['sabotageUnitsRequired']}"
    )
    return snapshot


def main(argv=None):
    """Main entry point for Beyond Us."""
    load_dotenv()

    parser = argparse.ArgumentParser(prog="beyondus", description="Beyond Us game session")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP/WebSocket session server")
    parser.add_argument("--host", default=os.getenv("BEYONDUS_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=_env_int("BEYONDUS_PORT", 8000))
    parser.add_argument("--bots", type=int, default=4, help="Bots in a headless session")
    parser.add_argument("--duration", type=float, default=30.0, help="Headless run length in seconds")
    args = parser.parse_args(argv)

    config = config_from_env()
    setup_logger(config)
    logger = logging.getLogger(__name__)

    if args.serve:
        import uvicorn

        from .server import create_app

        logger.info(f"Serving Beyond Us on http://{args.host}:{args.port}")
        uvicorn.run(create_app(config), host=args.host, port=args.port)
        return

    try:
        asyncio.run(run_headless(config, args.bots, args.duration))
    except KeyboardInterrupt:
        logger.info("Session interrupted by user")
    except Exception as e:
        logger.error(f"Session error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
