"""Business logic for Digimon queries.

``DigimonService`` turns the store's tagged results into formatted models.
``Absent`` lookups become ``None``; ``Failed`` results are logged once here
and re-raised as ``BackendError`` with an operation-specific message.
"""

import asyncio
import logging
import math

from digimon_api.db.digimon_store import DigimonStore
from digimon_api.db.results import Absent, Failed, QueryResult
from digimon_api.errors import BackendError
from digimon_api.models.digimon import (
    Digimon,
    DigimonStats,
    EvolutionData,
    PaginatedDigimons,
    Pagination,
)
from digimon_api.services.formatter import format_digimon, format_digimons

logger = logging.getLogger(__name__)


def _raise_on_failure(operation: str, message: str, *results: QueryResult) -> None:
    """Raise ``BackendError`` if any result failed; partial data is dropped."""
    causes = [r.cause for r in results if isinstance(r, Failed)]
    if causes:
        logger.error("%s failed: %s", operation, "; ".join(repr(c) for c in causes))
        raise BackendError(message)


class DigimonService:
    """Read-only Digimon operations over an injected ``DigimonStore``."""

    def __init__(self, store: DigimonStore) -> None:
        self._store = store

    async def list_digimons(self, page: int, limit: int, stage: str | None = None) -> PaginatedDigimons:
        """Return one page of Digimons ordered by number, optionally filtered by stage."""
        result = await self._store.list_digimons((page - 1) * limit, limit, stage)
        _raise_on_failure("list_digimons", "Não foi possível buscar os Digimons.", result)

        rows, total = result.value
        return PaginatedDigimons(
            data=format_digimons(rows),
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                totalPages=math.ceil(total / limit),
            ),
        )

    async def get_digimon_by_id(self, digimon_id: int) -> Digimon | None:
        result = await self._store.get_digimon_by_id(digimon_id)
        _raise_on_failure("get_digimon_by_id", "Erro ao buscar Digimon por ID.", result)
        if isinstance(result, Absent):
            return None
        return format_digimon(result.value)

    async def get_digimon_by_name(self, name: str) -> Digimon | None:
        result = await self._store.get_digimon_by_name(name)
        _raise_on_failure("get_digimon_by_name", "Erro ao buscar Digimon por nome.", result)
        if isinstance(result, Absent):
            return None
        return format_digimon(result.value)

    async def search_digimons(self, search_term: str, limit: int = 10) -> list[Digimon]:
        """Return up to ``limit`` Digimons whose name contains ``search_term``."""
        result = await self._store.search_digimons(search_term, limit)
        _raise_on_failure("search_digimons", "Erro ao pesquisar Digimons.", result)
        return format_digimons(result.value)

    async def get_evolution_data(self, digimon_id: int) -> EvolutionData:
        """Return a Digimon with its next evolutions, pre-evolutions and requirements.

        An unknown id short-circuits to ``EvolutionData(digimon=None)`` without
        querying edges or requirements. The three follow-up queries run
        concurrently and any failure fails the whole call.
        """
        digimon = await self.get_digimon_by_id(digimon_id)
        if digimon is None:
            return EvolutionData(digimon=None)

        evolves_to, evolves_from, requirements = await asyncio.gather(
            self._store.get_evolves_to(digimon_id),
            self._store.get_evolves_from(digimon_id),
            self._store.get_requirements(digimon_id),
        )
        _raise_on_failure(
            "get_evolution_data",
            "Erro ao buscar dados de evolução.",
            evolves_to,
            evolves_from,
            requirements,
        )

        return EvolutionData(
            digimon=digimon,
            evolves_to=format_digimons(evolves_to.value),
            evolves_from=format_digimons(evolves_from.value),
            requirements=requirements.value,
        )

    async def get_stats(self) -> DigimonStats:
        """Return the total Digimon count and the per-stage breakdown."""
        total, stages = await asyncio.gather(
            self._store.count_digimons(),
            self._store.count_by_stage(),
        )
        _raise_on_failure("get_stats", "Erro ao buscar estatísticas.", total, stages)
        return DigimonStats(total_digimons=total.value, count_by_stage=stages.value)
