"""
Programmatic Alembic migration runner for the taskboard schema.

Runs without an alembic.ini: the script location is the ``migrations``
package next to this file and the URL comes from taskboard.db.config.

Usage examples:
    python -m taskboard.db.run_migrations upgrade head
    python -m taskboard.db.run_migrations downgrade -1
    python -m taskboard.db.run_migrations current
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from alembic import command
from alembic.config import Config

from taskboard.db.config import get_settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

# command name -> (alembic function, default arguments)
_COMMANDS: Dict[str, tuple[Callable[..., object], List[str]]] = {
    "upgrade": (command.upgrade, ["head"]),
    "downgrade": (command.downgrade, ["-1"]),
    "history": (command.history, []),
    "current": (command.current, []),
    "heads": (command.heads, []),
}


# PUBLIC_INTERFACE
def build_config(url: Optional[str] = None) -> Config:
    """Alembic Config pointing at this package's migrations and the configured database."""
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", url or get_settings().sync_database_url)
    return cfg


# PUBLIC_INTERFACE
def main(argv: Optional[List[str]] = None) -> None:
    """Run one Alembic command, e.g. ``main(["upgrade", "head"])``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("No Alembic arguments provided. Example: upgrade head")
        sys.exit(1)

    name, rest = args[0], args[1:]
    if name not in _COMMANDS:
        print(f"Unsupported Alembic command: {name} (expected one of {', '.join(sorted(_COMMANDS))})")
        sys.exit(2)

    func, defaults = _COMMANDS[name]
    logger.info("alembic %s %s", name, " ".join(rest or defaults))
    func(build_config(), *(rest or defaults))


if __name__ == "__main__":
    main()
