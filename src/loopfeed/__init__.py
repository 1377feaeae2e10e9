"""LoopFeed: social video and image sharing backend."""

__version__ = "0.1.0"
