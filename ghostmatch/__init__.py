"""GhostMatch — anonymous campus matching: queue, matches, chat sessions and
notifications backed by a single persisted bundle."""

__version__ = "1.0.0"
