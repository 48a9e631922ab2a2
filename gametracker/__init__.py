"""Game Tracker: want-to-play, finished and abandoned game lists."""

__version__ = "1.0.0"
