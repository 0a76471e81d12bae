# Musync Output Module
# Rich console output

from musync.output.console import Console

__all__ = [
    "Console",
]
