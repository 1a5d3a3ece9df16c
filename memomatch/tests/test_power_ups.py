"""
Tests for power-ups.

Tests:
- Availability and counter consumption
- Shuffle only moves face-down cards, uniformly
- Hint only targets intact face-down pairs and expires
- Slow time bonus
"""

import random
from collections import Counter

from ..catalog import NORMAL
from ..engine_core.power_ups import PowerUpController
from ..engine_core.state import (
    Card,
    CardState,
    CharacterType,
    GamePhase,
    GameState,
    PowerUpKind,
    Suit,
)
from .conftest import mismatch_ids, pair_ids


def make_card(card_id, name, state=CardState.FACE_DOWN):
    return Card(id=card_id, name=name, flavor=CharacterType.ANIMAL, suit=Suit.CLUBS, state=state)


def make_state(deck, **kwargs) -> GameState:
    return GameState(
        session_id="test",
        epoch=1,
        difficulty=NORMAL,
        deck=tuple(deck),
        time_left=30,
        **kwargs,
    )


class TestAvailability:
    """Tests for when power-ups can be used."""

    def test_not_available_before_start(self, machine):
        for kind in PowerUpKind:
            assert not machine.use_power_up(kind).applied

    def test_counter_runs_out(self, playing_machine):
        """Shuffle has one use; the second attempt is ignored."""
        assert playing_machine.use_power_up(PowerUpKind.SHUFFLE).applied
        assert playing_machine.state.power_ups.shuffle == 0

        result = playing_machine.use_power_up(PowerUpKind.SHUFFLE)
        assert not result.applied
        assert playing_machine.state.power_ups.shuffle == 0

    def test_hint_has_two_uses(self, playing_machine):
        assert playing_machine.use_power_up(PowerUpKind.HINT).applied
        assert playing_machine.use_power_up(PowerUpKind.HINT).applied
        assert not playing_machine.use_power_up(PowerUpKind.HINT).applied
        assert playing_machine.state.power_ups.hint == 0

    def test_controller_rejects_finished_game(self):
        state = make_state([make_card(0, "A"), make_card(1, "A")], phase=GamePhase.WON)
        controller = PowerUpController(rng=random.Random(1))
        assert controller.plan(state, PowerUpKind.SLOW_TIME) is None
        assert controller.plan(None, PowerUpKind.SLOW_TIME) is None


class TestSlowTime:
    """Tests for the time bonus."""

    def test_adds_ten_seconds(self, playing_machine):
        result = playing_machine.use_power_up(PowerUpKind.SLOW_TIME)

        assert result.applied
        assert result.snapshot.time_left == 70
        assert result.snapshot.power_ups.slow_time == 0

    def test_counter_and_effect_published_together(self, playing_machine):
        """Observers never see the counter spent without the bonus."""
        snapshots = []
        playing_machine.subscribe(snapshots.append)
        playing_machine.use_power_up(PowerUpKind.SLOW_TIME)

        assert len(snapshots) == 1
        assert snapshots[0].power_ups.slow_time == 0
        assert snapshots[0].time_left == 70


class TestShuffle:
    """Tests for the shuffle power-up."""

    def test_matched_and_face_up_cards_stay_put(self, playing_machine):
        machine = playing_machine
        first, second = pair_ids(machine.state)
        machine.flip(first)
        machine.flip(second)
        third, _ = pair_ids(machine.state)
        machine.flip(third)

        before = machine.state
        fixed = {
            i: card.id for i, card in enumerate(before.deck)
            if card.state != CardState.FACE_DOWN
        }
        machine.use_power_up(PowerUpKind.SHUFFLE)
        after = machine.state

        for position, card_id in fixed.items():
            assert after.deck[position].id == card_id
        assert sorted(c.id for c in after.deck) == sorted(c.id for c in before.deck)
        assert after.face_up == (third,)

    def test_shuffle_during_reveal_window(self, playing_machine, clock):
        """Face-up mismatched cards keep their positions and still turn back."""
        machine = playing_machine
        first, second = mismatch_ids(machine.state)
        machine.flip(first)
        machine.flip(second)
        positions = (machine.state.index_of(first), machine.state.index_of(second))

        machine.use_power_up(PowerUpKind.SHUFFLE)
        assert (machine.state.index_of(first), machine.state.index_of(second)) == positions

        clock.advance(1000)
        assert machine.state.get_card(first).state == CardState.FACE_DOWN

    def test_uniform_over_face_down_positions(self):
        """Three face-down cards land in each of the 6 orders about equally."""
        deck = [
            make_card(0, "A", CardState.MATCHED),
            make_card(1, "B"),
            make_card(2, "A", CardState.MATCHED),
            make_card(3, "C"),
            make_card(4, "D"),
        ]
        state = make_state(deck)
        controller = PowerUpController(rng=random.Random(7))

        trials = 12000
        counts = Counter()
        for _ in range(trials):
            effect = controller.plan(state, PowerUpKind.SHUFFLE)
            assert effect.deck[0].id == 0
            assert effect.deck[2].id == 2
            counts[(effect.deck[1].id, effect.deck[3].id, effect.deck[4].id)] += 1

        assert len(counts) == 6
        expected = trials / 6
        for count in counts.values():
            assert abs(count - expected) < expected * 0.1


class TestHint:
    """Tests for the hint power-up."""

    def test_hint_targets_intact_pair(self):
        """Only a pair with both cards face down can be hinted."""
        deck = [
            make_card(0, "A", CardState.MATCHED),
            make_card(1, "A", CardState.MATCHED),
            make_card(2, "B", CardState.FACE_UP),
            make_card(3, "B"),
            make_card(4, "C"),
            make_card(5, "C"),
        ]
        state = make_state(deck, face_up=(2,))
        controller = PowerUpController(rng=random.Random(3))

        picks = {controller.plan(state, PowerUpKind.HINT).hinted for _ in range(200)}
        assert picks == {4, 5}

    def test_hint_spreads_over_pairs(self):
        """Every card of every intact pair can be picked."""
        deck = [make_card(i, "ABC"[i // 2]) for i in range(6)]
        controller = PowerUpController(rng=random.Random(11))

        counts = Counter(
            controller.plan(make_state(deck), PowerUpKind.HINT).hinted
            for _ in range(3000)
        )
        assert set(counts) == set(range(6))
        for count in counts.values():
            assert abs(count - 500) < 100

    def test_hint_sets_highlight_without_flipping(self, playing_machine):
        result = playing_machine.use_power_up(PowerUpKind.HINT)

        state = playing_machine.state
        assert result.applied
        assert state.hinted is not None
        assert state.face_up == ()
        assert state.get_card(state.hinted).state == CardState.FACE_DOWN

    def test_hint_expires(self, playing_machine, clock):
        playing_machine.use_power_up(PowerUpKind.HINT)

        clock.advance(2999)
        assert playing_machine.state.hinted is not None

        clock.advance(1)
        assert playing_machine.state.hinted is None

    def test_newer_hint_supersedes_older_expiry(self, playing_machine, clock):
        playing_machine.use_power_up(PowerUpKind.HINT)
        clock.advance(2000)
        playing_machine.use_power_up(PowerUpKind.HINT)

        clock.advance(1000)  # first hint's expiry
        assert playing_machine.state.hinted is not None

        clock.advance(2000)  # second hint's expiry
        assert playing_machine.state.hinted is None

    def test_hint_without_intact_pair_is_consumed(self, playing_machine):
        """No intact pair left: the use is spent and nothing is highlighted."""
        machine = playing_machine
        for _ in range(NORMAL.pairs - 1):
            first, second = pair_ids(machine.state)
            machine.flip(first)
            machine.flip(second)
        last, _ = pair_ids(machine.state)
        machine.flip(last)

        result = machine.use_power_up(PowerUpKind.HINT)

        assert result.applied
        assert machine.state.power_ups.hint == 1
        assert machine.state.hinted is None

    def test_hint_cleared_when_game_ends(self, playing_machine, clock):
        playing_machine.use_power_up(PowerUpKind.HINT)
        clock.advance(60_000)

        assert playing_machine.phase == GamePhase.LOST
        assert playing_machine.state.hinted is None
