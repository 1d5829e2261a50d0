"""
Tests for the game engine.
"""
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from game.arena import Arena, manhattan
from game.engine import (
    GameEngine, GameState, MoveResult, Phase, Direction, CrashCause, DIRECTIONS,
    new_game, move, resolve_move, crash, place_obstacles, choose_exit,
    is_pulsing, pulsing_cells, safe_directions, play_random_game,
    GRID_SIZE, NUM_OBSTACLES, MIN_OBSTACLE_DISTANCE, INITIAL_LIVES,
    VICTORY_MESSAGE, INVALID_DIRECTION_MESSAGE, SHRINK_MESSAGE,
    NOT_STARTED_MESSAGE, GAME_FINISHED_MESSAGE,
)


def make_state(
    player=(4, 4),
    obstacles=((8, 8),),
    exit=(0, 0),
    turn=0,
    lives=3,
    border_size=0,
    phase=Phase.PLAYING,
):
    """Build a fixed board for scenario tests."""
    return GameState(
        player=player,
        obstacles=tuple(obstacles),
        exit=exit,
        turn=turn,
        lives=lives,
        border_size=border_size,
        phase=phase,
    )


def assert_valid_board(state: GameState):
    arena = Arena(state.grid_size)
    assert len(state.obstacles) == NUM_OBSTACLES
    assert len(set(state.obstacles)) == NUM_OBSTACLES
    for pos in state.obstacles:
        assert manhattan(pos, arena.center) >= MIN_OBSTACLE_DISTANCE
    assert state.exit in arena.perimeter()
    assert state.exit not in state.obstacles


class TestNewGame:
    """Test board generation."""

    def test_initial_state(self):
        """Fresh game starts in the centre with full lives."""
        state = new_game(np.random.default_rng(0))

        assert state.player == (4, 4)
        assert state.turn == 0
        assert state.border_size == 0
        assert state.lives == INITIAL_LIVES
        assert state.phase == Phase.PLAYING
        assert state.message == ""

    def test_generated_boards_are_valid(self):
        """Obstacles distinct and far from centre, exit on free perimeter."""
        rng = np.random.default_rng(123)
        for _ in range(200):
            assert_valid_board(new_game(rng))

    def test_same_seed_same_board(self):
        state1 = new_game(np.random.default_rng(7))
        state2 = new_game(np.random.default_rng(7))

        assert state1 == state2

    def test_lives_carried(self):
        """Respawned boards keep the lives they are given."""
        state = new_game(np.random.default_rng(0), lives=2)
        assert state.lives == 2

    def test_place_obstacles_fallback(self):
        """Hitting the retry cap still yields a valid placement."""
        arena = Arena(GRID_SIZE)
        obstacles = place_obstacles(arena, np.random.default_rng(0), max_attempts=0)

        assert len(set(obstacles)) == NUM_OBSTACLES
        assert all(manhattan(p, arena.center) >= MIN_OBSTACLE_DISTANCE for p in obstacles)

    def test_place_obstacles_impossible(self):
        """A grid with no eligible cells is rejected."""
        with pytest.raises(ValueError):
            place_obstacles(Arena(3), np.random.default_rng(0))

    def test_choose_exit_skips_obstacles(self):
        """Only the free perimeter cell can be chosen."""
        arena = Arena(5)
        free = (0, 2)
        obstacles = tuple(p for p in arena.perimeter() if p != free)

        for seed in range(10):
            assert choose_exit(arena, obstacles, np.random.default_rng(seed)) == free


class TestMovement:
    """Test movement resolution and the momentum slide."""

    def test_full_slide(self):
        """Open board: moving N from the centre slides two tiles."""
        result = move(make_state(), Direction.N)

        assert result.success
        assert result.state.player == (2, 4)
        assert result.slid
        assert result.state.turn == 1
        assert not result.crashed

    def test_each_direction(self):
        expected = {
            Direction.N: (2, 4),
            Direction.S: (6, 4),
            Direction.E: (4, 6),
            Direction.W: (4, 2),
        }
        for direction, destination in expected.items():
            assert move(make_state(), direction).state.player == destination

    def test_lowercase_letter(self):
        result = move(make_state(), "n")
        assert result.success
        assert result.direction == Direction.N

    def test_stop_short_before_obstacle(self):
        """Second tile blocked: stop after one tile."""
        state = make_state(obstacles=[(2, 4)])
        result = move(state, Direction.N)

        assert result.state.player == (3, 4)
        assert not result.slid
        assert result.state.turn == 1

    def test_stop_short_before_wall(self):
        state = make_state(player=(1, 4))
        result = move(state, Direction.N)

        assert result.state.player == (0, 4)
        assert not result.crashed

    def test_crash_into_obstacle(self):
        """Obstacle on the first tile: crash, turn unchanged, board re-randomised."""
        state = make_state(obstacles=[(3, 4)])
        result = move(state, Direction.N, np.random.default_rng(1))

        assert result.success
        assert result.crashed
        assert result.crash_cause == CrashCause.OBSTACLE
        assert not result.turn_advanced
        assert result.state.turn == 0
        assert result.state.lives == 2
        assert result.state.phase == Phase.PLAYING
        assert result.state.player == (4, 4)
        assert result.state.message == "Crashed! Lives remaining: 2"
        assert_valid_board(result.state)

    def test_crash_into_outer_wall(self):
        state = make_state(player=(0, 4))
        result = move(state, Direction.N, np.random.default_rng(0))

        assert result.crashed
        assert result.crash_cause == CrashCause.WALL

    def test_crash_into_border_wall(self):
        """Walled-off ring is impassable."""
        state = make_state(player=(1, 4), turn=6, border_size=1, exit=(0, 0))
        result = move(state, Direction.N, np.random.default_rng(0))

        assert result.crashed
        assert result.crash_cause == CrashCause.WALL

    def test_invalid_direction(self):
        """Invalid input leaves the state untouched."""
        state = make_state()
        result = move(state, "X")

        assert not result.success
        assert result.state is state
        assert result.message == INVALID_DIRECTION_MESSAGE

    def test_invalid_direction_type(self):
        state = make_state()
        assert not move(state, None).success
        assert not move(state, "north").success


class TestPulses:
    """Test the pulse rule."""

    def test_pulsing_cells(self):
        """Even turn: the four neighbours of an obstacle pulse."""
        state = make_state(obstacles=[(2, 4)], turn=2)

        assert pulsing_cells(state) == {(1, 4), (3, 4), (2, 3), (2, 5)}

    def test_only_orthogonal_neighbours_pulse(self):
        state = make_state(obstacles=[(2, 4)], turn=2)

        assert is_pulsing(state, (3, 4))
        assert not is_pulsing(state, (3, 5))
        assert not is_pulsing(state, (4, 4))

    def test_crash_into_pulse(self):
        state = make_state(obstacles=[(2, 4)], turn=2)
        result = move(state, Direction.N, np.random.default_rng(0))

        assert result.crashed
        assert result.crash_cause == CrashCause.PULSE
        assert result.state.turn == 0
        assert result.state.lives == 2

    def test_no_pulses_on_odd_turn(self):
        state = make_state(obstacles=[(2, 4)], turn=3)

        assert pulsing_cells(state) == frozenset()
        result = move(state, Direction.N)
        assert not result.crashed
        assert result.state.player == (3, 4)

    def test_no_pulses_on_turn_zero(self):
        state = make_state(obstacles=[(2, 4)], turn=0)

        assert not is_pulsing(state, (3, 4))
        assert move(state, Direction.N).state.player == (3, 4)

    def test_pulse_stops_slide(self):
        """Pulse on the second tile stops the slide after one tile."""
        state = make_state(obstacles=[(1, 4)], turn=2)
        result = move(state, Direction.N)

        assert not result.crashed
        assert result.state.player == (3, 4)

    def test_walled_obstacle_does_not_pulse(self):
        """Obstacles swallowed by the walls are no longer live."""
        state = make_state(player=(3, 4), obstacles=[(0, 4)], turn=6, border_size=1)

        assert not is_pulsing(state, (1, 4))
        result = move(state, Direction.N)
        assert not result.crashed
        assert result.state.player == (1, 4)

    def test_pulse_cells_exclude_walls_and_obstacles(self):
        state = make_state(obstacles=[(0, 4), (1, 4)], turn=2)

        cells = pulsing_cells(state)
        assert (0, 4) not in cells
        assert (1, 4) not in cells
        assert (-1, 4) not in cells
        assert (2, 4) in cells


class TestArenaShrink:
    """Test arena shrinking every five turns."""

    def test_shrink_on_fifth_turn(self):
        state = make_state(turn=4, obstacles=[(8, 8)])
        result = move(state, Direction.E)

        assert result.shrunk
        assert not result.crashed
        assert result.state.turn == 5
        assert result.state.border_size == 1
        assert result.state.message == SHRINK_MESSAGE

    def test_no_shrink_between_intervals(self):
        state = make_state(turn=5, border_size=1, obstacles=[(8, 8)])
        result = move(state, Direction.E)

        assert not result.shrunk
        assert result.state.border_size == 1

    def test_shrink_crashes_player_in_ring(self):
        """Ending a move in the new wall ring costs a life."""
        state = make_state(player=(2, 4), turn=4, exit=(8, 0), obstacles=[(8, 8)])
        result = move(state, Direction.N, np.random.default_rng(0))

        assert result.end == (0, 4)
        assert result.turn_advanced
        assert result.shrunk
        assert result.crashed
        assert result.crash_cause == CrashCause.SHRINK
        assert result.state.lives == 2
        assert result.state.turn == 0
        assert result.state.border_size == 0

    def test_resolve_move_predicts_shrink_crash(self):
        state = make_state(player=(2, 4), turn=4, exit=(8, 0), obstacles=[(8, 8)])
        res = resolve_move(state, Direction.N)

        assert res.crashes
        assert res.border_size == 1
        assert Direction.N not in safe_directions(state)


class TestVictory:
    """Test reaching the exit."""

    def test_reach_exit(self):
        state = make_state(player=(2, 4), exit=(0, 4))
        result = move(state, Direction.N)

        assert result.reached_exit
        assert result.state.phase == Phase.VICTORY
        assert result.state.message == VICTORY_MESSAGE
        assert result.state.turn == 1

    def test_victory_beats_shrink(self):
        """Exit reached on a shrink turn: no shrink happens."""
        state = make_state(player=(2, 4), exit=(0, 4), turn=4)
        result = move(state, Direction.N)

        assert result.state.phase == Phase.VICTORY
        assert result.state.turn == 5
        assert result.state.border_size == 0
        assert not result.shrunk

    def test_sliding_past_exit_does_not_win(self):
        state = make_state(player=(0, 2), exit=(0, 1))
        result = move(state, Direction.W)

        assert result.state.player == (0, 0)
        assert result.state.phase == Phase.PLAYING

    def test_moves_blocked_after_victory(self):
        state = make_state(player=(2, 4), exit=(0, 4))
        won = move(state, Direction.N).state
        result = move(won, Direction.S)

        assert not result.success
        assert result.state is won
        assert result.message == GAME_FINISHED_MESSAGE


class TestCrashHandling:
    """Test lives and game over."""

    def test_last_life_ends_game(self):
        state = make_state(obstacles=[(3, 4)], lives=1)
        result = move(state, Direction.N, np.random.default_rng(0))

        assert result.crashed
        assert result.game_over
        assert result.state.phase == Phase.GAME_OVER
        assert result.state.lives == 0
        assert "Game over" in result.state.message

    def test_moves_blocked_after_game_over(self):
        state = make_state(obstacles=[(3, 4)], lives=1)
        over = move(state, Direction.N, np.random.default_rng(0)).state
        result = move(over, Direction.S)

        assert not result.success
        assert result.state.lives == 0
        assert result.state.phase == Phase.GAME_OVER

    def test_crash_counts_down(self):
        state = make_state(lives=3)
        state = crash(state, np.random.default_rng(0))
        assert state.lives == 2 and state.phase == Phase.PLAYING
        state = crash(state, np.random.default_rng(0))
        assert state.lives == 1 and state.phase == Phase.PLAYING
        state = crash(state, np.random.default_rng(0))
        assert state.lives == 0 and state.phase == Phase.GAME_OVER

    def test_not_started_state_rejects_moves(self):
        state = make_state(phase=Phase.NOT_STARTED)
        result = move(state, Direction.N)

        assert not result.success
        assert result.message == NOT_STARTED_MESSAGE


class TestInvariants:
    """Invariants over many random games."""

    def test_turn_border_and_lives(self):
        for seed in range(20):
            engine = GameEngine(seed=seed)
            engine.new_game()

            while not engine.is_finished():
                before = engine.get_state()
                options = engine.get_safe_directions() or list(DIRECTIONS)
                direction = options[int(engine.rng.integers(len(options)))]
                result = engine.make_move(direction)
                after = result.state

                assert after.lives >= 0
                if result.crashed:
                    assert after.lives == before.lives - 1
                    if after.phase == Phase.PLAYING:
                        assert after.turn == 0
                        assert after.border_size == 0
                        assert_valid_board(after)
                    else:
                        assert after.lives == 0
                elif result.reached_exit:
                    assert after.phase == Phase.VICTORY
                    assert after.border_size == before.border_size
                else:
                    assert after.turn == before.turn + 1
                    assert after.border_size >= before.border_size
                    assert after.border_size == after.turn // 5
                    assert after.lives == before.lives


class TestGameEngine:
    """Test the session wrapper."""

    def test_not_started(self):
        engine = GameEngine()

        assert engine.phase == Phase.NOT_STARTED
        result = engine.make_move(Direction.N)
        assert not result.success
        assert result.message == NOT_STARTED_MESSAGE

    def test_new_game(self):
        engine = GameEngine(seed=42)
        state = engine.new_game()

        assert engine.phase == Phase.PLAYING
        assert engine.get_state() is state
        assert engine.get_statistics()['boards_played'] == 1

    def test_reset_with_seed(self):
        engine1 = GameEngine(seed=1)
        engine2 = GameEngine(seed=2)

        assert engine1.reset(seed=42) == engine2.reset(seed=42)

    def test_make_move_statistics(self):
        engine = GameEngine()
        engine.set_state(make_state())
        engine.make_move("N")

        stats = engine.get_statistics()
        assert stats['moves_made'] == 1
        assert stats['turn'] == 1
        assert stats['crashes'] == 0

    def test_crash_statistics(self):
        engine = GameEngine(seed=0)
        engine.set_state(make_state(obstacles=[(3, 4)]))
        engine.make_move(Direction.N)

        stats = engine.get_statistics()
        assert stats['crashes'] == 1
        assert stats['moves_made'] == 0
        assert stats['lives'] == 2

    def test_invalid_move_keeps_state(self):
        engine = GameEngine()
        state = make_state()
        engine.set_state(state)
        result = engine.make_move("up")

        assert not result.success
        assert engine.get_state() is state

    def test_action_mask(self):
        engine = GameEngine()
        engine.set_state(make_state(player=(0, 4), obstacles=[(1, 4)]))

        mask = engine.get_action_mask()
        assert mask.shape == (4,)
        assert mask.dtype == bool
        # N hits the outer wall, S hits the obstacle
        assert not mask[0]
        assert not mask[1]
        assert mask[2] and mask[3]

    def test_observation_shapes(self):
        engine = GameEngine(seed=0)
        engine.new_game()
        obs = engine.get_observation()

        assert obs['grid'].shape == (5, 9, 9)
        assert obs['status'].shape == (3,)
        assert obs['action_mask'].shape == (4,)
        assert obs['grid'][4, 4, 4] == 1.0

    def test_state_round_trip(self):
        state = make_state(obstacles=[(0, 8), (8, 0)], turn=3)
        assert GameState.from_dict(state.to_dict()) == state

    def test_str(self):
        engine = GameEngine(seed=0)
        engine.new_game()
        assert "Lives: 3" in str(engine)


class TestRandomGame:
    """Test random game playing."""

    def test_play_random_game(self):
        stats = play_random_game(seed=42)

        assert stats['phase'] in ('victory', 'game_over')
        assert stats['boards_played'] >= 1

    def test_random_game_deterministic(self):
        assert play_random_game(seed=7) == play_random_game(seed=7)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
