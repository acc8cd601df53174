"""
Launcher for NexusBot.

Runs the bot from the repository root using `python bot.py`, reading the
.env file that sits next to this script when there is one.
"""

import sys
from pathlib import Path

if __name__ == "__main__":
    # --- Path Setup ---
    project_root = Path(__file__).parent

    # Make the package importable without installing it
    sys.path.insert(0, str(project_root))

    dotenv_path = project_root / ".env"

    from nexusbot.main import run

    run(dotenv_path=dotenv_path if dotenv_path.exists() else None)
