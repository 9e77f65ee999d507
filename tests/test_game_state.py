import random

import pytest

from tilerise.config import GameConfig
from tilerise.events import ScoreKind
from tilerise.game_state import GameState


def _state(rows=(), **kwargs):
    state = GameState(GameConfig(seed=7, strict_falls=True, **kwargs))
    width = state.width
    state.board.load([list(r) + [0] * (width - len(r)) for r in rows])
    return state


def _checker_rows(count, width=10):
    # Four colors on a diagonal never line up three in a row or column.
    return [[(row + col) % 4 + 1 for col in range(width)] for row in range(count)]


def test_new_session_starts_empty_with_incoming_row():
    state = GameState(GameConfig(seed=3))
    assert state.snapshot().sum() == 0
    assert len(state.incoming) == state.width
    assert all(1 <= v <= 4 for v in state.incoming)
    assert state.norma == 100
    assert not state.dead


def test_horizontal_three_scores_300():
    state = _state([[1, 1, 1, 2]])
    state.tick()
    assert state.score == 300
    assert state.norma == 97
    assert state.combo == 1
    assert [state.tile(0, c) for c in range(4)] == [0, 0, 0, 2]
    events = state.drain_events()
    assert len(events) == 1
    assert events[0].amount == 300
    assert events[0].kind is ScoreKind.MATCH
    assert (events[0].row, events[0].col) == (0.0, 1.0)
    assert state.drain_events() == []


def test_plus_shape_scores_both_runs():
    state = _state([[2, 1, 3], [1, 1, 1], [0, 1, 0]])
    state.tick()
    assert state.score == 600
    assert state.norma == 94
    grid = state.snapshot()
    assert grid.sum() == 2 + 3
    assert grid[0][0] == 2 and grid[0][2] == 3


def test_combo_raises_match_value():
    state = _state([[1, 1, 1]])
    state.combo = 2
    state.process_matches()
    assert state.score == 360


def test_clear_starts_fall_and_cascade_waits_for_landing():
    # Clearing the middle row leaves a tile hanging two rows up.
    state = _state([[2, 3, 4], [1, 1, 1], [2, 0, 0]])
    state.tick()
    assert state.score == 300
    assert state.fall_count == 1
    assert state.is_falling(2, 0)
    progress = state.progress

    for _ in range(state.config.fall_time):
        state.tick()
        assert state.progress == progress
    state.tick()
    assert state.tile(1, 0) == 2
    assert state.tile(2, 0) == 0
    assert state.fall_count == 0


def test_fall_fraction_tracks_fall_timer():
    state = _state([[1], [0], [2]])
    state.check_falls()
    assert state.fall_fraction == 0.0
    state.tick()
    state.tick()
    assert state.fall_fraction == pytest.approx(1 / state.config.fall_time)


def test_row_advance_resets_combo_and_brings_incoming():
    state = _state([[1, 2]])
    pattern = [3, 4] * (state.width // 2)
    state.board.incoming[:] = pattern
    state.combo = 4
    state.progress = 0.999

    state.tick()

    assert state.combo == 0
    assert state.progress == pytest.approx(0.999 + 1 / 120 - 1)
    assert [state.tile(0, c) for c in range(state.width)] == pattern
    assert state.tile(1, 0) == 1
    assert state.tile(1, 1) == 2
    assert all(1 <= v <= 4 for v in state.incoming)


def test_advance_row_resets_combo():
    state = _state([[1, 2]])
    state.combo = 4
    state.advance_row()
    assert state.combo == 0
    assert state.tile(1, 1) == 2


def test_level_up_wipes_from_lowest_open_row():
    rows = _checker_rows(2)
    rows.append([(2 + col) % 4 + 1 for col in range(5)])
    rows.append([(3 + col) % 4 + 1 for col in range(3)])
    state = _state(rows)
    below = state.snapshot()[:2].copy()
    state.norma = -1

    state.tick()

    assert state.level == 1
    assert state.score == 8 * (100 + 10 * 2)
    assert state.norma == -1 + 120
    grid = state.snapshot()
    assert (grid[:2] == below).all()
    assert grid[2:].sum() == 0
    events = state.drain_events()
    assert len(events) == 8
    assert all(e.kind is ScoreKind.WIPE for e in events)


def test_level_up_with_full_board_wipes_nothing():
    state = _state(_checker_rows(20))
    state.level_up()
    assert state.level == 1
    assert state.score == 0
    assert state.norma == 100 + 120


def test_death_when_stack_reaches_top():
    state = _state()
    state.board.set_tile(state.height - 1, 0, 3)
    state.progress = 0.999
    before = state.snapshot()

    state.tick()

    assert state.dead
    assert (state.snapshot() == before).all()
    score = state.score
    for _ in range(200):
        state.tick()
    assert (state.snapshot() == before).all()
    assert state.score == score
    assert state.request_swap(state.height - 1, 0) is False


def test_swapping_pauses_rise():
    state = _state([[1, 2, 3]])
    state.request_swap(0, 0)
    state.tick()
    assert state.progress == 0.0


def test_invariants_hold_over_long_random_session():
    state = GameState(GameConfig(seed=11, strict_falls=True))
    rng = random.Random(5)
    for tick in range(20000):
        if state.dead:
            break
        if tick % 7 == 0:
            state.request_swap(rng.randrange(state.height), rng.randrange(state.width - 1))
        advanced_before = state.board.bottom_row
        state.tick()
        assert state.falls_consistent()
        assert state.fall_count >= 0
        assert 0.0 <= state.progress < 1.0
        if state.board.bottom_row != advanced_before:
            assert state.combo <= 1
    assert state.score >= 0
