"""Engine construction and seed loading for the two store backends."""

import json
import logging
from functools import lru_cache
from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import create_engine

from digimon_api.config import settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the shared engine for ``settings.DATABASE_URL``.

    ``pool_pre_ping`` verifies pooled connections are alive before use.
    """
    logger.info("Creating database engine")
    return create_engine(settings.DATABASE_URL, pool_pre_ping=True, echo=settings.DEBUG)


def resolve_seed_path(value: str) -> Path:
    """Resolve a seed path; relative paths are taken from the project root."""
    path = Path(value)
    return path if path.is_absolute() else PROJECT_ROOT / path


def load_seed(path: Path) -> dict[str, list[dict]]:
    """Load the in-memory backend's seed file.

    Returns a dict with ``digimons``, ``evolutions`` and ``requirements``
    lists. A missing or malformed file yields empty lists.
    """
    empty: dict[str, list[dict]] = {"digimons": [], "evolutions": [], "requirements": []}
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        logger.error("Seed file not found: %s", path)
        return empty
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in seed file: %s", e)
        return empty

    seed = {key: list(raw.get(key, [])) for key in empty}
    logger.info(
        "Loaded %d digimons, %d evolutions, %d requirements from %s",
        len(seed["digimons"]),
        len(seed["evolutions"]),
        len(seed["requirements"]),
        path,
    )
    return seed
