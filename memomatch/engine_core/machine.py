"""
Game State Machine - Owns the session and applies every transition.

The machine is the single point of state mutation. Transitions come from:
1. Intents dispatched by the presentation layer (start, flip, power-up, ...)
2. Countdown ticks from the Clock
3. Delayed callbacks (mismatch reveal window, hint expiry)

Design principles:
- Each transition builds a new GameState and swaps it in one assignment
- Invalid intents are ignored, never raised
- Every scheduled callback is bound to the epoch it was scheduled under;
  the epoch moves on start, restart, return to menu and game end, so a
  callback from an older epoch does nothing
"""

from __future__ import annotations
import logging
import random
import uuid
from typing import Callable

from .action import Action, ActionResult, ActionType
from .board import BoardGenerator
from .clock import Clock, TimerHandle
from .power_ups import PowerUpController
from .rules import DEFAULT_RULES, GameRules
from .state import (
    CardState,
    Difficulty,
    GamePhase,
    GameSnapshot,
    GameState,
    PowerUpKind,
)

logger = logging.getLogger(__name__)

Listener = Callable[[GameSnapshot], None]


class GameStateMachine:
    """
    Runs one player's game from the menu through win or loss.

    Usage:
        machine = GameStateMachine(clock=VirtualClock(), rng=random.Random(7))
        machine.subscribe(render)
        machine.start(NORMAL)
        machine.flip(3)
    """

    def __init__(
        self,
        clock: Clock,
        rng: random.Random | None = None,
        generator: BoardGenerator | None = None,
        power_ups: PowerUpController | None = None,
        rules: GameRules = DEFAULT_RULES,
    ):
        rng = rng or random.Random()
        self.clock = clock
        self.rules = rules
        self.generator = generator or BoardGenerator(rng=rng)
        self.power_ups = power_ups or PowerUpController(rng=rng, rules=rules)

        self._state: GameState | None = None
        self._epoch = 0
        self._hint_serial = 0
        self._ticker: TimerHandle | None = None
        self._timers: set[TimerHandle] = set()
        self._listeners: list[Listener] = []

    # =========================================================================
    # Observation
    # =========================================================================

    @property
    def state(self) -> GameState | None:
        return self._state

    @property
    def phase(self) -> GamePhase:
        if self._state is None:
            return GamePhase.NOT_STARTED
        return self._state.phase

    @property
    def epoch(self) -> int:
        return self._epoch

    def snapshot(self) -> GameSnapshot:
        if self._state is None:
            return GameSnapshot.empty(self._epoch)
        return self._state.snapshot()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call `listener` with a snapshot after every applied transition.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # Intents
    # =========================================================================

    def dispatch(self, action: Action) -> ActionResult:
        """Route an intent to its handler."""
        handlers = {
            ActionType.START_GAME: self._handle_start,
            ActionType.FLIP_CARD: self._handle_flip,
            ActionType.USE_POWER_UP: self._handle_power_up,
            ActionType.RESTART: lambda action: self.restart(),
            ActionType.RETURN_TO_MENU: lambda action: self.return_to_menu(),
        }
        handler = handlers.get(action.action_type)
        if handler is None:
            return self._ignore(f"No handler for action type: {action.action_type}")
        return handler(action)

    def _handle_start(self, action: Action) -> ActionResult:
        if action.payload.difficulty is None:
            return self._ignore("Start requested without a difficulty")
        return self.start(action.payload.difficulty)

    def _handle_flip(self, action: Action) -> ActionResult:
        if action.payload.card_id is None:
            return self._ignore("Flip requested without a card id")
        return self.flip(action.payload.card_id)

    def _handle_power_up(self, action: Action) -> ActionResult:
        if action.payload.power_up is None:
            return self._ignore("Power-up requested without a kind")
        return self.use_power_up(action.payload.power_up)

    def start(self, difficulty: Difficulty) -> ActionResult:
        """
        Start a new session from the menu or after a game has ended.

        Raises:
            ConfigurationError: if the board cannot be generated; the
                current state is left untouched
        """
        if self.phase == GamePhase.PLAYING:
            return self._ignore("A game is already in progress")
        return self._begin(difficulty, verb="Started")

    def restart(self) -> ActionResult:
        """Throw the current session away and deal a new one at the same difficulty."""
        if self._state is None:
            return self._ignore("Nothing to restart")
        return self._begin(self._state.difficulty, verb="Restarted")

    def return_to_menu(self) -> ActionResult:
        """Discard the session without dealing a new board."""
        if self._state is None:
            return self._ignore("Already at the menu")

        self._end_epoch()
        self._state = None
        logger.info("Returned to menu (epoch %d)", self._epoch)
        return self._publish(["Returned to menu"])

    def flip(self, card_id: int) -> ActionResult:
        """Turn a face-down card face up, resolving the pair on the second flip."""
        state = self._state
        if state is None or state.phase != GamePhase.PLAYING:
            return self._ignore("Not playing")
        if len(state.face_up) >= 2:
            return self._ignore("Two cards are already face up")

        card = state.get_card(card_id)
        if card is None:
            return self._ignore(f"No card with id {card_id}")
        if card.state != CardState.FACE_DOWN:
            return self._ignore(f"Card {card_id} is {card.state.value}")

        face_up = state.face_up + (card_id,)
        new_state = state._copy_with(
            deck=state.with_card_states((card_id,), CardState.FACE_UP),
            face_up=face_up,
        )
        changes = [f"Flipped {card.name} (card {card_id})"]

        if len(face_up) == 2:
            new_state = self._resolve_pair(new_state, changes)

        return self._commit(new_state, changes)

    def use_power_up(self, kind: PowerUpKind) -> ActionResult:
        """Spend one use of a power-up and apply its effect in the same transition."""
        effect = self.power_ups.plan(self._state, kind)
        if effect is None:
            return self._ignore(f"Power-up {kind.value} is not available")

        state = self._state
        new_state = state._copy_with(power_ups=state.power_ups.spend(kind))
        if effect.deck is not None:
            new_state = new_state._copy_with(deck=effect.deck)
        if effect.time_bonus:
            new_state = new_state._copy_with(time_left=new_state.time_left + effect.time_bonus)
        if effect.hinted is not None:
            new_state = new_state._copy_with(hinted=effect.hinted)
            self._hint_serial += 1
            self._schedule(self.rules.hint_duration_ms, self._expire_hint, self._hint_serial)

        return self._commit(new_state, [effect.describe()])

    # =========================================================================
    # Clock-driven transitions
    # =========================================================================

    def _on_tick(self) -> None:
        state = self._state
        if state is None or state.phase != GamePhase.PLAYING:
            return

        time_left = max(0, state.time_left - 1)
        new_state = state._copy_with(time_left=time_left)
        changes = []
        if time_left == 0:
            new_state = new_state._copy_with(phase=GamePhase.LOST)
            changes.append("Time expired")
        self._commit(new_state, changes)

    def _hide_mismatch(self, card_ids: tuple[int, ...]) -> None:
        state = self._state
        if state is None or state.phase != GamePhase.PLAYING or state.face_up != card_ids:
            return

        new_state = state._copy_with(
            deck=state.with_card_states(card_ids, CardState.FACE_DOWN),
            face_up=(),
            time_left=max(
                self.rules.mismatch_time_floor,
                state.time_left - self.rules.mismatch_time_penalty,
            ),
        )
        self._commit(new_state, ["Mismatched cards turned back over"])

    def _expire_hint(self, serial: int) -> None:
        state = self._state
        # A newer hint owns the highlight now
        if state is None or serial != self._hint_serial or state.hinted is None:
            return
        self._commit(state._copy_with(hinted=None), ["Hint expired"])

    # =========================================================================
    # Internals
    # =========================================================================

    def _begin(self, difficulty: Difficulty, verb: str) -> ActionResult:
        # Generate before touching anything so a ConfigurationError leaves state as is
        deck = self.generator.generate(difficulty)

        self._end_epoch()
        self._state = GameState(
            session_id=str(uuid.uuid4()),
            epoch=self._epoch,
            difficulty=difficulty,
            deck=deck,
            time_left=difficulty.time_limit_seconds,
            phase=GamePhase.PLAYING,
            power_ups=self.rules.starting_power_ups,
        )
        self._ticker = self._schedule_every(self.rules.tick_interval_ms, self._on_tick)

        logger.info(
            "%s %s game: %d pairs, %ds (epoch %d)",
            verb, difficulty.name, difficulty.pairs, difficulty.time_limit_seconds, self._epoch,
        )
        return self._publish([f"{verb} {difficulty.name} game"])

    def _resolve_pair(self, state: GameState, changes: list[str]) -> GameState:
        """Decide a match or mismatch for the two face-up cards."""
        first, second = (state.get_card(card_id) for card_id in state.face_up)

        if first.name != second.name:
            self._schedule(self.rules.mismatch_delay_ms, self._hide_mismatch, state.face_up)
            changes.append(f"No match: {first.name} / {second.name}")
            return state

        matched = state.matched_pair_count + 1
        new_state = state._copy_with(
            deck=state.with_card_states(state.face_up, CardState.MATCHED),
            face_up=(),
            score=state.score + self.rules.match_points,
            matched_pair_count=matched,
            time_left=state.time_left + self.rules.match_time_bonus,
        )
        changes.append(f"Matched {first.name}")
        if matched == state.difficulty.pairs:
            new_state = new_state._copy_with(phase=GamePhase.WON)
            changes.append("All pairs found")
        return new_state

    def _commit(self, new_state: GameState, changes: list[str]) -> ActionResult:
        """Swap in a new state, closing the epoch if the game just ended."""
        was_playing = self._state is not None and self._state.phase == GamePhase.PLAYING
        if was_playing and new_state.phase.is_terminal:
            new_state = new_state._copy_with(hinted=None)
            self._end_epoch()
            logger.info(
                "Game %s: score=%d pairs=%d/%d time_left=%d",
                new_state.phase.value,
                new_state.score,
                new_state.matched_pair_count,
                new_state.difficulty.pairs,
                new_state.time_left,
            )
        self._state = new_state
        return self._publish(changes)

    def _publish(self, changes: list[str]) -> ActionResult:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
        return ActionResult.applied_with(snapshot, changes)

    def _ignore(self, reason: str) -> ActionResult:
        logger.debug("Ignored intent: %s", reason)
        return ActionResult.ignored(self.snapshot(), reason)

    def _end_epoch(self) -> None:
        """Cancel every timer and invalidate callbacks already in flight."""
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()
        self._epoch += 1

    def _schedule(self, delay_ms: int, callback: Callable, *args) -> TimerHandle:
        epoch = self._epoch
        handle: TimerHandle | None = None

        def fire():
            self._timers.discard(handle)
            if epoch != self._epoch:
                logger.debug("Dropped stale callback %s from epoch %d", callback.__name__, epoch)
                return
            callback(*args)

        handle = self.clock.call_later(delay_ms, fire)
        self._timers.add(handle)
        return handle

    def _schedule_every(self, interval_ms: int, callback: Callable) -> TimerHandle:
        epoch = self._epoch

        def fire():
            if epoch != self._epoch:
                logger.debug("Dropped stale tick from epoch %d", epoch)
                return
            callback()

        return self.clock.call_every(interval_ms, fire)
