"""Autonomous bot loop: one cancellable asyncio task per bot."""

import asyncio
import logging
import random
from typing import Dict, List

from ..core.actions import Action, Investigate, Move, StartTask
from ..core.enums import EventKind, Zone
from ..core.errors import GameError
from ..core.game_session import GameSession
from ..core.game_state import GameEvent


logger = logging.getLogger(__name__)


class BotController:
    """
    Drives every bot in a session with randomized actions.

    Each bot sleeps a uniform interval between the configured bounds, then
    submits move, startTask or investigate (equal weight) through the
    session exactly like a human would. Bots never vote or complete tasks.

    Timers are cancelled as a group when the game ends or the session is
    reset, and individually when a bot leaves or is captured.
    """

    def __init__(self, session: GameSession):
        self.session = session
        self.config = session.config
        self.tasks: Dict[int, asyncio.Task] = {}
        self._unsubscribe = session.subscribe(self._on_event)

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self.tasks.values())

    def start(self) -> List[int]:
        """
        Spawn a task for every bot that does not have one yet.
        Must be called from a running event loop.

        Returns:
            Ids of bots that were started.
        """
        loop = asyncio.get_running_loop()
        started = []
        for bot in self.session.roster.bots:
            if bot.id in self.tasks:
                continue
            rng = random.Random(self.session.rng.random()) if self.config.seed is not None else random.Random()
            self.tasks[bot.id] = loop.create_task(self._run_bot(bot.id, rng), name=f"bot-{bot.id}")
            started.append(bot.id)
        if started:
            logger.info(f"Started {len(started)} bot(s)")
        return started

    def cancel(self, bot_id: int):
        """Stop a single bot's timer."""
        task = self.tasks.pop(bot_id, None)
        if task is not None and not task.done():
            task.cancel()
            logger.debug(f"Cancelled bot {bot_id}")

    def cancel_all(self):
        for bot_id in list(self.tasks):
            self.cancel(bot_id)

    async def stop(self):
        """Cancel every bot and wait until none can fire again."""
        tasks = list(self.tasks.values())
        self.cancel_all()
        current = asyncio.current_task()
        pending = [task for task in tasks if task is not current]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def close(self):
        """Cancel everything and stop listening to the session."""
        self.cancel_all()
        self._unsubscribe()

    def choose_action(self, rng: random.Random) -> Action:
        """Pick move, startTask or investigate with equal weight."""
        choice = rng.randrange(3)
        if choice == 0:
            return Move(rng.choice(list(Zone)))
        if choice == 1:
            return StartTask()
        return Investigate()

    def next_delay(self, rng: random.Random) -> float:
        """Seconds until a bot acts again, uniform over the configured interval."""
        return rng.uniform(self.config.bot_interval_min, self.config.bot_interval_max)

    async def _run_bot(self, bot_id: int, rng: random.Random):
        while True:
            await asyncio.sleep(self.next_delay(rng))
            action = self.choose_action(rng)
            try:
                self.session.apply(bot_id, action)
            except GameError as e:
                # Dropped, not queued; the bot tries again next tick
                logger.debug(f"Bot {bot_id} action {type(action).__name__} rejected: {e}")

    def _on_event(self, event: GameEvent):
        if event.kind in (EventKind.GAME_ENDED, EventKind.RESET):
            self.cancel_all()
        elif event.kind is EventKind.LEFT and event.actor_id is not None:
            self.cancel(event.actor_id)
        elif event.kind is EventKind.CAPTURED and event.target_id is not None:
            if event.target_id not in self.session.roster:
                self.cancel(event.target_id)
