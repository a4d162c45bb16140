import argparse
import os
import sys

import pygame

from game import Game2048, Direction
from score_store import FileScoreStore, MemoryScoreStore, ScoreStoreError


BEST_SCORE_FILE = os.path.join(os.path.expanduser("~"), ".game2048", "best_score.txt")
FPS = 60

COLORS = {
    'background': (250, 248, 239),
    'grid_background': (187, 173, 160),
    'text_dark': (119, 110, 101),
    'overlay': (238, 228, 218, 186),
    'win': (237, 194, 46),
    'lose': (200, 0, 0),
}

# tile value -> (background, text)
TILE_STYLES = {
    0: ((205, 193, 180), None),
    2: ((238, 228, 218), (119, 110, 101)),
    4: ((237, 224, 200), (119, 110, 101)),
    8: ((242, 177, 121), (249, 246, 242)),
    16: ((245, 149, 99), (249, 246, 242)),
    32: ((246, 124, 95), (249, 246, 242)),
    64: ((246, 94, 59), (249, 246, 242)),
    128: ((237, 207, 114), (249, 246, 242)),
    256: ((237, 204, 97), (249, 246, 242)),
    512: ((237, 200, 80), (249, 246, 242)),
    1024: ((237, 197, 63), (249, 246, 242)),
    2048: ((237, 194, 46), (249, 246, 242)),
}
SUPER_TILE_STYLE = ((60, 58, 50), (249, 246, 242))

# digits in the tile value -> font size
TILE_FONT_SIZES = {1: 56, 2: 52, 3: 44, 4: 36}


def tile_style(value):
    """(background, text color) for a tile, text color is None for empty cells"""
    return TILE_STYLES.get(value, SUPER_TILE_STYLE)


KEY_TO_DIRECTION = {
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
}


class GameGUI:
    def __init__(self, store, seed=None):
        """initialize game GUI"""
        pygame.init()

        self.store = store
        self.game = Game2048(seed=seed, store=store)

        # GUI settings
        self.cell_size = 100
        self.cell_margin = 10
        self.header_height = 120

        # window size
        grid_size = 4 * self.cell_size + 5 * self.cell_margin
        self.window_width = grid_size
        self.window_height = grid_size + self.header_height

        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        pygame.display.set_caption("2048 Game")

        # fonts
        self.font_large = pygame.font.Font(None, 48)
        self.font_medium = pygame.font.Font(None, 36)
        self.font_small = pygame.font.Font(None, 24)
        self.tile_fonts = {}

        self.clock = pygame.time.Clock()

    def new_game(self):
        """start over with a fresh engine, keeping the best score store"""
        best_score = self.game.best_score
        try:
            game = Game2048(rng=self.game.rng, store=self.store)
        except ScoreStoreError as e:
            print(f"[WARNING] {e}")
            self.store = MemoryScoreStore(best_score)
            game = Game2048(rng=self.game.rng, store=self.store)
        self.game = game
        # the store may have failed to save, keep what this session saw
        self.game.best_score = max(self.game.best_score, best_score)
        print("Game restarted!")

    def draw_board(self):
        """draw the game board"""
        self.screen.fill(COLORS['background'])

        self.draw_header()

        grid_y = self.header_height
        grid_rect = pygame.Rect(0, grid_y, self.window_width, self.window_width)
        pygame.draw.rect(self.screen, COLORS['grid_background'], grid_rect)

        board = self.game.board
        for row in range(4):
            for col in range(4):
                self.draw_cell(row, col, board[row][col])

        if self.game.game_over:
            self.draw_overlay("Game Over!", COLORS['lose'])
        elif self.game.game_won:
            self.draw_overlay("You Win!", COLORS['win'])

    def draw_header(self):
        """draw the header with scores and instructions"""
        score_text = self.font_large.render(f"Score: {self.game.score}", True, COLORS['text_dark'])
        self.screen.blit(score_text, (20, 20))

        best_text = self.font_small.render(f"Best: {self.game.best_score}", True, COLORS['text_dark'])
        best_rect = best_text.get_rect()
        best_rect.topright = (self.window_width - 20, 32)
        self.screen.blit(best_text, best_rect)

        instruction_surface = self.font_small.render("Arrow keys to move, U to undo", True, COLORS['text_dark'])
        self.screen.blit(instruction_surface, (20, 70))

        restart_text = self.font_small.render("Press R to restart, ESC to quit", True, COLORS['text_dark'])
        self.screen.blit(restart_text, (20, 95))

    def tile_font(self, value):
        """font sized to the number of digits, cached per size"""
        size = TILE_FONT_SIZES.get(len(str(value)), 28)
        if size not in self.tile_fonts:
            self.tile_fonts[size] = pygame.font.Font(None, size)
        return self.tile_fonts[size]

    def cell_rect(self, row, col):
        step = self.cell_size + self.cell_margin
        return pygame.Rect(self.cell_margin + col * step,
                           self.header_height + self.cell_margin + row * step,
                           self.cell_size, self.cell_size)

    def draw_cell(self, row, col, value):
        """draw one tile, empty cells only get their background"""
        background, text_color = tile_style(value)
        rect = self.cell_rect(row, col)
        pygame.draw.rect(self.screen, background, rect, border_radius=8)

        if text_color is not None:
            label = self.tile_font(value).render(str(value), True, text_color)
            self.screen.blit(label, label.get_rect(center=rect.center))

    def draw_overlay(self, title, color):
        """translucent panel over the grid with the final score"""
        overlay = pygame.Surface((self.window_width, self.window_width), pygame.SRCALPHA)
        overlay.fill(COLORS['overlay'])
        self.screen.blit(overlay, (0, self.header_height))

        center_x = self.window_width // 2
        center_y = self.header_height + self.window_width // 2

        title_surface = self.font_large.render(title, True, color)
        self.screen.blit(title_surface, title_surface.get_rect(center=(center_x, center_y - 30)))

        score_surface = self.font_medium.render(f"Score: {self.game.score}", True, COLORS['text_dark'])
        self.screen.blit(score_surface, score_surface.get_rect(center=(center_x, center_y + 10)))

        hint_surface = self.font_small.render("R: new game   U: undo", True, COLORS['text_dark'])
        self.screen.blit(hint_surface, hint_surface.get_rect(center=(center_x, center_y + 45)))

    def handle_keypress(self, key):
        """keyboard input"""
        if key == pygame.K_ESCAPE:
            return False  # quit

        elif key in (pygame.K_r, pygame.K_n):
            self.new_game()

        elif key == pygame.K_u:
            self.game.undo()

        elif key in KEY_TO_DIRECTION:
            try:
                result = self.game.move(KEY_TO_DIRECTION[key])
            except ScoreStoreError as e:
                print(f"[WARNING] {e}")
            else:
                if result.moved and result.over:
                    print(f"Game over! Final score: {self.game.score}")
                elif result.moved and result.won:
                    print(f"2048 reached! Score: {self.game.score}")

        return True  # continue

    def run(self):
        """main loop"""
        print("2048 Game Started!")
        print("Use arrow keys to move tiles, U to undo")
        print("Press R to restart, ESC to quit")
        print()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = self.handle_keypress(event.key)

            self.draw_board()
            pygame.display.flip()
            self.clock.tick(FPS)

        pygame.quit()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play 2048")
    parser.add_argument("--best-score-file", default=BEST_SCORE_FILE,
                        help="file holding the best score")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for tile spawns")
    return parser.parse_args(argv)


def open_store(filepath):
    """file store for the best score, or a memory store if the file is unreadable"""
    store = FileScoreStore(filepath)
    try:
        store.load()
    except ScoreStoreError as e:
        print(f"[WARNING] {e}")
        print("Best score will not be saved this session.")
        return MemoryScoreStore()
    return store


def main(argv=None):
    args = parse_args(argv)
    store = open_store(args.best_score_file)

    try:
        game = GameGUI(store, seed=args.seed)
        game.run()
    except Exception as e:
        print(f"Error running game: {e}")
        pygame.quit()
        sys.exit(1)


if __name__ == "__main__":
    main()
