"""HTTP API for LoopFeed."""
