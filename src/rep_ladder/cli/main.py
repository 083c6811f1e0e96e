"""
CLI entry point using Typer.

Provides commands for daily volume tracking:
- init: Configure an exercise and seed the daily target
- log-set: Log a completed set
- history: Display logged sets
- delete-set: Remove a logged set
- adjust: Apply the daily target adjustment
- review: Weekly recovery score and volume change
- status: Today's targets and suggested sets
- catalog: Exercise difficulty ladders
"""

from .app import app
from .commands import catalog, review, sessions  # noqa: F401  (registers commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
