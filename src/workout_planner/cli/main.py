"""
CLI entry point using Typer.

Provides commands for workout plan management:
- generate / customize / repopulate: build and rebuild plans
- template: recommended settings for a goal and level
- list / show / activate / delete: stored plans
- move / status / add / remove: single-session edits
- recurring / edit-recurring: sessions sharing a training block
- stats / balance: plan analysis
"""

from .app import app
from .commands import analysis, planning, plans, sessions  # noqa: F401  (registers commands)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
