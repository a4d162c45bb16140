import gymnasium as gym
from gymnasium import spaces
import numpy as np
from game import Game2048, Direction, SIZE, render_board


class Game2048Env(gym.Env):
    """
    gymnasium environment for 2048 game

    - observation is the 4x4 board of raw tile values
    - reward is the points earned from merging
    - episode ends when the game is won or over
    - info carries the afterstate (board after the move, before the new tile)
    """

    metadata = {"render_modes": ["human", "ansi"]}

    def __init__(self, render_mode=None, store=None):
        super().__init__()

        self.render_mode = render_mode
        self.store = store
        self.game = Game2048(store=store)

        # actions -> 4 possible moves
        # 0 = up, 1 = down, 2 = left, 3 = right
        self.action_space = spaces.Discrete(4)

        self.observation_space = spaces.Box(
            low=0,
            high=131072,  # largest tile reachable on a 4x4 board
            shape=(SIZE, SIZE),
            dtype=np.int32
        )

        # map actions to game directions
        self.action_to_direction = {
            0: Direction.UP,
            1: Direction.DOWN,
            2: Direction.LEFT,
            3: Direction.RIGHT
        }

    def _get_observation(self):
        """convert the flat game grid to a 4x4 observation"""
        return np.array(self.game.grid, dtype=np.int32).reshape(SIZE, SIZE)

    def get_afterstate(self, action):
        """
        board after the move but before the random tile

        returns:
            afterstate_board: 4x4 board, or None if the move is invalid
            reward: points earned from merging
            valid: if the move was valid
        """
        cells, points, moved = self.game.preview(self.action_to_direction[action])
        if not moved:
            return None, 0, False
        return np.array(cells, dtype=np.int32).reshape(SIZE, SIZE), points, True

    def valid_actions(self):
        """mask of actions that would change the board"""
        if self.game.game_over or self.game.game_won:
            return np.zeros(4, dtype=np.int8)
        return np.array(
            [self.get_afterstate(action)[2] for action in range(4)],
            dtype=np.int8
        )

    def reset(self, seed=None, options=None):
        """reset the game to start a new episode"""
        super().reset(seed=seed)

        if seed is not None:
            self.game.rng.seed(seed)
        self.game.reset()

        observation = self._get_observation()
        info = {"score": self.game.score, "best_score": self.game.best_score}

        return observation, info

    def step(self, action):
        """take one step in the environment"""
        afterstate_board, _, valid = self.get_afterstate(action)

        result = self.game.move(self.action_to_direction[action])
        reward = float(result.points) if result.moved else 0.0

        observation = self._get_observation()
        terminated = self.game.game_over or self.game.game_won
        truncated = False

        info = {
            "score": self.game.score,
            "best_score": self.game.best_score,
            "moved": result.moved,
            "points_gained": result.points,
            "won": self.game.game_won,
            "over": self.game.game_over,
            "afterstate": afterstate_board if valid else None,
            "max_tile": self.game.max_tile
        }

        if self.render_mode == "human":
            self.render()

        return observation, reward, terminated, truncated, info

    def render(self):
        """display the game state"""
        if self.render_mode == "ansi":
            return render_board(self.game.grid, self.game.score)
        if self.render_mode == "human":
            self.game.print_board()
        return None

    def close(self):
        """clean up resources"""
