"""Projection of stored Digimon records to the public field set."""

import logging
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from digimon_api.models.digimon import Digimon

logger = logging.getLogger(__name__)

PUBLIC_FIELDS = ("id", "number", "name", "stage", "attribute", "image_url")


def format_digimon(record: Mapping[str, Any] | None) -> Digimon | None:
    """Return the six public fields of ``record``, or None when it is absent.

    Any other stored column is dropped. A record that cannot be projected
    (no ``id``, non-numeric ``number``, ...) is treated as absent.
    """
    if not record:
        return None
    try:
        return Digimon(**{field: record.get(field) for field in PUBLIC_FIELDS})
    except ValidationError as e:
        logger.warning("Skipping malformed Digimon record id=%r: %s", record.get("id"), e)
        return None


def format_digimons(records: Iterable[Mapping[str, Any] | None]) -> list[Digimon]:
    """Format ``records``, dropping any that cannot be projected."""
    return [d for d in map(format_digimon, records) if d is not None]
