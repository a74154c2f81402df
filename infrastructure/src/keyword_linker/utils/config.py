"""
Environment configuration (.env supported).
"""
import os
import logging
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

RULES_FILENAME = '.keyword-linker.yaml'


class Settings:
    """Values read from the environment at construction time."""

    def __init__(self):
        self.vault_root = Path(os.getenv('VAULT_ROOT', './vault'))
        rules_file = os.getenv('KEYWORD_RULES_FILE')
        self.rules_file = Path(rules_file) if rules_file else self.vault_root / RULES_FILENAME
        env_workers = os.getenv('LINKER_WORKERS', '1')
        try:
            self.workers = int(env_workers)
        except ValueError:
            logger.warning(f"Invalid LINKER_WORKERS={env_workers!r}, using 1")
            self.workers = 1


def load_settings(env_file: Path = None) -> Settings:
    """Load .env (existing environment wins) and return Settings."""
    load_dotenv(env_file or Path.cwd() / '.env')
    return Settings()
