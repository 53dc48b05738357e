from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional

from tictactoe.controller import GameController

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[Dict], Awaitable[None]]


class TurnScheduler:
    """Owns the recurring tick task and the one-shot AI task for a controller.

    Call :meth:`sync` after every transition made outside the scheduler so the
    tasks match the controller again. Both tasks are tagged with the round they
    were armed for and do nothing once that round is superseded.
    """

    def __init__(self, controller: GameController, on_change: Optional[ChangeCallback] = None) -> None:
        self.controller = controller
        self.on_change = on_change
        self._tick_task: Optional[asyncio.Task] = None
        self._ai_task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._tick_task is not None or self._ai_task is not None

    def sync(self, restart_timer: bool = True) -> None:
        if restart_timer or not self.controller.timer.active:
            self._cancel_tick()
        if self.controller.timer.active and self._tick_task is None:
            self._tick_task = asyncio.create_task(self._run_ticks(self.controller.round_id))
        self._sync_ai()

    def _sync_ai(self) -> None:
        if not self.controller.ai_pending:
            self._cancel_ai()
        elif self._ai_task is None:
            self._ai_task = asyncio.create_task(self._run_ai(self.controller.round_id))

    def cancel(self) -> None:
        self._cancel_tick()
        self._cancel_ai()

    def _cancel_tick(self) -> None:
        if self._tick_task is not None:
            self._tick_task.cancel()
            self._tick_task = None

    def _cancel_ai(self) -> None:
        if self._ai_task is not None:
            logger.debug("Cancelling pending AI move for round %d", self.controller.round_id)
            self._ai_task.cancel()
            self._ai_task = None

    async def _notify(self) -> None:
        if self.on_change is not None:
            await self.on_change(self.controller.snapshot())

    async def _run_ticks(self, round_id: int) -> None:
        interval = self.controller.settings.tick_interval
        me = asyncio.current_task()
        try:
            while True:
                await asyncio.sleep(interval)
                if not self.controller.tick(round_id):
                    return
                await self._notify()
                self._sync_ai()
                if not self.controller.timer.active:
                    return
        finally:
            if self._tick_task is me:
                self._tick_task = None

    async def _run_ai(self, round_id: int) -> None:
        await asyncio.sleep(self.controller.settings.ai_delay)
        if self._ai_task is asyncio.current_task():
            self._ai_task = None
        if self.controller.play_ai_move(round_id):
            self.sync()
            await self._notify()
