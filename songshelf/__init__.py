"""songshelf: list and upload album-organised audio files over HTTP."""

__version__ = "1.0.0"
