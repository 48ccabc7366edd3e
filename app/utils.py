import os
import re
from typing import Optional

from alembic import command
from alembic.config import Config

ALEMBIC_INI = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "alembic.ini")


def sanitize_input(text: Optional[str]) -> str:
    """Removes HTML tags to prevent XSS and strips whitespace."""
    if not text:
        return ""
    clean = re.compile('<.*?>')
    return re.sub(clean, '', text).strip()


def run_migrations(alembic_ini_path: str = ALEMBIC_INI):
    """
    Run Alembic migrations programmatically to upgrade the database
    to the latest version.

    :param alembic_ini_path: Path to alembic.ini file
    """
    alembic_cfg = Config(alembic_ini_path)
    command.upgrade(alembic_cfg, "head")
