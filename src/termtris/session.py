"""Game session: gravity ticks, player commands and the main loop.

The session owns one :class:`~termtris.board.Board` and drives it through the
spawn, fall, lock, clear and respawn cycle.  Input and drawing are passed in
as plain callables so the loop can run under curses, in tests, or headless.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Optional

from .board import Board


LOGGER = logging.getLogger(__name__)


class Command(str, Enum):
    """Discrete player requests, one per key press."""

    LEFT = "left"
    RIGHT = "right"
    DOWN = "down"
    ROTATE = "rotate"
    QUIT = "quit"


class Speed(float, Enum):
    """Gravity presets: seconds between automatic downward steps."""

    DOABLE = 0.5
    FAST = 0.05
    SUPER_FAST = 0.0165

    @property
    def label(self) -> str:
        return _SPEED_LABELS[self]

    @classmethod
    def from_choice(cls, choice: str) -> "Speed":
        """Return the preset for a speed-menu answer (``"1"``, ``"2"`` or ``"3"``).

        Raises:
            ValueError: If ``choice`` names no preset.
        """

        try:
            return _SPEED_CHOICES[choice.strip()]
        except KeyError:
            raise ValueError(f"Unknown speed choice: {choice!r}") from None


_SPEED_LABELS = {
    Speed.DOABLE: "Doable",
    Speed.FAST: "Fast",
    Speed.SUPER_FAST: "Super Fast",
}
_SPEED_CHOICES = {"1": Speed.DOABLE, "2": Speed.FAST, "3": Speed.SUPER_FAST}


class GameSession:
    """Run one game on a single board."""

    def __init__(
        self,
        board: Optional[Board] = None,
        *,
        speed: Speed = Speed.DOABLE,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.board = board if board is not None else Board()
        self.speed = speed
        self._clock = clock
        self._last_tick = clock()
        self.quit_requested = False
        self.locks = 0

    @property
    def game_over(self) -> bool:
        return self.board.is_full()

    @property
    def finished(self) -> bool:
        return self.quit_requested or self.game_over

    @property
    def score(self) -> int:
        return self.board.score

    def handle(self, command: Command) -> bool:
        """Apply a player command; return ``True`` if the board changed.

        Sideways and downward moves are validated with
        :meth:`Board.is_colliding` before moving.  A soft drop never locks the
        piece; locking is left to gravity.
        """

        board = self.board
        x, y = board.position
        if command is Command.LEFT:
            target = (x - 1, y)
        elif command is Command.RIGHT:
            target = (x + 1, y)
        elif command is Command.DOWN:
            target = (x, y + 1)
        elif command is Command.ROTATE:
            return not board.rotate()
        elif command is Command.QUIT:
            LOGGER.info("Quit requested with score %d", board.score)
            self.quit_requested = True
            return False
        else:
            raise ValueError(f"Unknown command: {command!r}")

        if board.is_colliding(*target):
            return False
        board.move(*target)
        return True

    def tick(self) -> bool:
        """Run one gravity step; return ``True`` if a piece was locked."""

        locked = self.board.lock_if_grounded()
        if locked:
            self.locks += 1
            if self.game_over:
                LOGGER.info("Game over after %d pieces. Score: %d", self.locks, self.board.score)
        return locked

    def update(self, now: Optional[float] = None) -> bool:
        """Fire a gravity tick if the speed interval has elapsed.

        Returns ``True`` when a tick ran.
        """

        if now is None:
            now = self._clock()
        if now - self._last_tick <= self.speed.value:
            return False
        self.tick()
        self._last_tick = now
        return True

    def run(
        self,
        poll: Callable[[], Optional[Command]],
        render: Callable[[Board], None],
        idle: Optional[Callable[[], None]] = None,
    ) -> int:
        """Play until game over or quit and return the final score.

        ``poll`` must not block; it returns the next pending command or
        ``None``.  ``render`` receives the board after every gravity tick and
        after every command that changed it.  ``idle`` runs once per loop
        iteration, typically a short sleep.
        """

        LOGGER.info("Session started at %s speed", self.speed.label)
        self._last_tick = self._clock()
        render(self.board)
        while not self.finished:
            command = poll()
            if command is not None and self.handle(command):
                render(self.board)
            if self.quit_requested:
                break
            if self.update():
                render(self.board)
            if idle is not None:
                idle()
        return self.board.score
