"""
best score storage
"""
import os


class ScoreStoreError(Exception):
    """reading or writing the stored best score failed"""


class MemoryScoreStore:
    """keeps the best score for the lifetime of the process"""

    def __init__(self, best_score=0):
        self.best_score = best_score

    def load(self):
        return self.best_score

    def save(self, score):
        self.best_score = score


class FileScoreStore:
    """
    keeps the best score as a single integer in a text file

    a missing file reads as 0, anything unreadable raises ScoreStoreError
    """

    def __init__(self, filepath):
        self.filepath = filepath

    def load(self):
        if not os.path.exists(self.filepath):
            return 0
        try:
            with open(self.filepath, "r") as f:
                score = int(f.read().strip())
        except (OSError, ValueError) as e:
            raise ScoreStoreError(f"could not read best score from {self.filepath}: {e}") from e
        if score < 0:
            raise ScoreStoreError(f"negative best score in {self.filepath}: {score}")
        return score

    def save(self, score):
        directory = os.path.dirname(self.filepath)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.filepath, "w") as f:
                f.write(str(score))
        except OSError as e:
            raise ScoreStoreError(f"could not write best score to {self.filepath}: {e}") from e
