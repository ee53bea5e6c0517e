#!/usr/bin/env python3
# Load environment variables from .env files in priority order:
# ./.env (highest), ~/procdom/.env, /etc/procdom/.env (lowest)
from pathlib import Path

from dotenv import load_dotenv

config_paths = [
    Path.cwd() / ".env",
    Path.home() / "procdom" / ".env",
    Path("/etc/procdom/.env"),
]

for config_path in config_paths:
    if config_path.exists():
        load_dotenv(config_path, override=False)  # Don't override already-set vars

from procdom.cli import main  # noqa: E402

if __name__ == "__main__":
    main()
