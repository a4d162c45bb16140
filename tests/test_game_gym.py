import numpy as np
import pytest

from game import Direction, Game2048
from game_gym import Game2048Env


@pytest.fixture
def env():
    env = Game2048Env()
    yield env
    env.close()


def test_reset_returns_board(env):
    observation, info = env.reset(seed=3)

    assert observation.shape == (4, 4)
    assert observation.dtype == np.int32
    assert np.count_nonzero(observation) == 2
    assert info["score"] == 0
    assert env.observation_space.contains(observation)


def test_reset_seed_is_reproducible(env):
    first, _ = env.reset(seed=10)
    second, _ = env.reset(seed=10)
    assert np.array_equal(first, second)


def test_action_mapping(env):
    assert env.action_to_direction == {
        0: Direction.UP,
        1: Direction.DOWN,
        2: Direction.LEFT,
        3: Direction.RIGHT,
    }


def test_step_reports_points_and_afterstate(env):
    env.reset(seed=1)
    env.game = Game2048.from_grid([2, 2, 0, 0] + [0] * 12, seed=1)

    observation, reward, terminated, truncated, info = env.step(2)

    assert reward == 4.0
    assert info["moved"]
    assert info["points_gained"] == 4
    assert info["afterstate"][0].tolist() == [4, 0, 0, 0]
    assert np.count_nonzero(info["afterstate"]) == 1
    assert np.count_nonzero(observation) == 2
    assert not terminated
    assert not truncated


def test_invalid_step_changes_nothing(env):
    env.reset(seed=1)
    env.game = Game2048.from_grid([2, 4, 0, 0] + [0] * 12, seed=1)

    observation, reward, terminated, _, info = env.step(2)

    assert reward == 0.0
    assert not info["moved"]
    assert info["afterstate"] is None
    assert observation[0].tolist() == [2, 4, 0, 0]
    assert not terminated


def test_win_terminates_episode(env):
    env.reset(seed=1)
    env.game = Game2048.from_grid([1024, 1024, 0, 0] + [0] * 12, seed=1)

    _, reward, terminated, _, info = env.step(2)

    assert reward == 2048.0
    assert terminated
    assert info["won"]
    assert info["max_tile"] == 2048


def test_step_after_win_has_no_afterstate(env):
    env.reset(seed=1)
    env.game = Game2048.from_grid([1024, 1024, 0, 0] + [0] * 12, seed=1)
    env.step(2)

    observation, reward, terminated, _, info = env.step(3)

    assert reward == 0.0
    assert not info["moved"]
    assert info["afterstate"] is None
    assert terminated
    assert env.get_afterstate(3) == (None, 0, False)
    assert env.valid_actions().tolist() == [0, 0, 0, 0]


def test_valid_actions_mask(env):
    env.reset(seed=1)
    env.game = Game2048.from_grid([2, 0, 0, 0] + [0] * 12, seed=1)

    # up and left cannot move a tile already in the corner
    assert env.valid_actions().tolist() == [0, 1, 0, 1]


def test_random_episode_runs(env):
    env.reset(seed=0)
    rng = np.random.default_rng(0)
    score = 0
    for _ in range(200):
        action = int(rng.integers(4))
        _, reward, terminated, _, info = env.step(action)
        score += reward
        if terminated:
            break
    assert info["score"] == score


def test_render_ansi():
    env = Game2048Env(render_mode="ansi")
    env.reset(seed=2)
    text = env.render()
    assert text.startswith("Score: 0")
