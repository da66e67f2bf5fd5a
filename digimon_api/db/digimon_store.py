"""Pluggable Digimon storage: in-memory for dev/test, SQL for production.

``get_store()`` returns a singleton whose concrete type depends on whether
``DATABASE_URL`` is configured.

Every operation returns a tagged result (see ``digimon_api.db.results``)
instead of raising, so the service layer decides how failures surface.
"""

import abc
import logging
from collections import Counter
from typing import Any, Callable

from sqlalchemy import func, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select
from starlette.concurrency import run_in_threadpool

from digimon_api.config import settings
from digimon_api.db.database import get_engine, load_seed, resolve_seed_path
from digimon_api.db.results import Absent, Failed, Found, QueryResult
from digimon_api.db.tables import DigimonRow, EvolutionRow

logger = logging.getLogger(__name__)


def _escape_like(term: str) -> str:
    """Make ``%`` and ``_`` in a search term match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _single(rows: list[dict]) -> QueryResult:
    """Collapse a single-row lookup: exactly one match is ``Found``."""
    if len(rows) == 1:
        return Found(rows[0])
    return Absent()


# ---------------------------------------------------------------------------
# Abstract interface
# ---------------------------------------------------------------------------

class DigimonStore(abc.ABC):
    """Common interface for read-only Digimon queries."""

    @abc.abstractmethod
    async def list_digimons(self, offset: int, limit: int, stage: str | None = None) -> QueryResult:
        """Return ``Found((rows, total))`` for one page ordered by ``number``.

        ``total`` counts every row matching ``stage``, ignoring the page.
        """

    @abc.abstractmethod
    async def get_digimon_by_id(self, digimon_id: int) -> QueryResult:
        """Return ``Found(row)`` or ``Absent()`` for an id lookup."""

    @abc.abstractmethod
    async def get_digimon_by_name(self, name: str) -> QueryResult:
        """Return ``Found(row)`` or ``Absent()`` for an exact, case-sensitive name."""

    @abc.abstractmethod
    async def search_digimons(self, term: str, limit: int) -> QueryResult:
        """Return ``Found(rows)`` whose name contains ``term`` case-insensitively."""

    @abc.abstractmethod
    async def get_evolves_to(self, digimon_id: int) -> QueryResult:
        """Return ``Found(rows)`` of the Digimons ``digimon_id`` evolves into."""

    @abc.abstractmethod
    async def get_evolves_from(self, digimon_id: int) -> QueryResult:
        """Return ``Found(rows)`` of the Digimons that evolve into ``digimon_id``."""

    @abc.abstractmethod
    async def get_requirements(self, digimon_id: int) -> QueryResult:
        """Return ``Found(rows)`` of raw requirement rows for ``digimon_id``."""

    @abc.abstractmethod
    async def count_digimons(self) -> QueryResult:
        """Return ``Found(total)``."""

    @abc.abstractmethod
    async def count_by_stage(self) -> QueryResult:
        """Return ``Found(rows)`` from the per-stage aggregate."""


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------

class InMemoryDigimonStore(DigimonStore):
    """List-backed store for local development and tests."""

    def __init__(
        self,
        digimons: list[dict] | None = None,
        evolutions: list[dict] | None = None,
        requirements: list[dict] | None = None,
    ) -> None:
        self._digimons = sorted(digimons or [], key=lambda d: (d.get("number") is None, d.get("number") or 0))
        self._evolutions = list(evolutions or [])
        self._requirements = list(requirements or [])

    @classmethod
    def from_seed(cls, seed_file: str) -> "InMemoryDigimonStore":
        seed = load_seed(resolve_seed_path(seed_file))
        return cls(seed["digimons"], seed["evolutions"], seed["requirements"])

    def _by_ids(self, ids: set[int]) -> list[dict]:
        return [d for d in self._digimons if d.get("id") in ids]

    async def list_digimons(self, offset: int, limit: int, stage: str | None = None) -> QueryResult:
        rows = [d for d in self._digimons if not stage or d.get("stage") == stage]
        return Found((rows[offset:offset + limit], len(rows)))

    async def get_digimon_by_id(self, digimon_id: int) -> QueryResult:
        return _single([d for d in self._digimons if d.get("id") == digimon_id])

    async def get_digimon_by_name(self, name: str) -> QueryResult:
        return _single([d for d in self._digimons if d.get("name") == name])

    async def search_digimons(self, term: str, limit: int) -> QueryResult:
        needle = term.lower()
        matches = [d for d in self._digimons if needle in (d.get("name") or "").lower()]
        return Found(matches[:limit])

    async def get_evolves_to(self, digimon_id: int) -> QueryResult:
        targets = {e["to_digimon_id"] for e in self._evolutions if e.get("from_digimon_id") == digimon_id}
        return Found(self._by_ids(targets))

    async def get_evolves_from(self, digimon_id: int) -> QueryResult:
        sources = {e["from_digimon_id"] for e in self._evolutions if e.get("to_digimon_id") == digimon_id}
        return Found(self._by_ids(sources))

    async def get_requirements(self, digimon_id: int) -> QueryResult:
        return Found([dict(r) for r in self._requirements if r.get("digimon_id") == digimon_id])

    async def count_digimons(self) -> QueryResult:
        return Found(len(self._digimons))

    async def count_by_stage(self) -> QueryResult:
        counts = Counter(d.get("stage") for d in self._digimons)
        return Found([
            {"stage": stage, "count": count}
            for stage, count in sorted(counts.items(), key=lambda item: str(item[0]))
        ])


# ---------------------------------------------------------------------------
# SQL implementation
# ---------------------------------------------------------------------------

class SQLDigimonStore(DigimonStore):
    """SQLModel-backed store over the managed PostgreSQL database.

    Each call opens its own session and runs in the threadpool, so
    independent calls awaited together execute concurrently.
    """

    def __init__(self, engine: Engine, stats_function: str = "count_digimons_by_stage") -> None:
        self._engine = engine
        self._stats_function = stats_function

    async def _run(self, fn: Callable[..., QueryResult], *args: Any) -> QueryResult:
        try:
            return await run_in_threadpool(fn, *args)
        except SQLAlchemyError as e:
            return Failed(e)

    # -- blocking query bodies ------------------------------------------------

    def _list(self, offset: int, limit: int, stage: str | None) -> QueryResult:
        query = select(DigimonRow)
        if stage:
            query = query.where(DigimonRow.stage == stage)
        with Session(self._engine) as session:
            total = session.exec(select(func.count()).select_from(query.subquery())).one()
            rows = session.exec(
                query.order_by(DigimonRow.number, DigimonRow.id).offset(offset).limit(limit)
            ).all()
        return Found(([r.model_dump() for r in rows], total))

    def _lookup(self, column: Any, value: Any) -> QueryResult:
        with Session(self._engine) as session:
            rows = session.exec(select(DigimonRow).where(column == value).limit(2)).all()
        return _single([r.model_dump() for r in rows])

    def _search(self, term: str, limit: int) -> QueryResult:
        with Session(self._engine) as session:
            rows = session.exec(
                select(DigimonRow)
                .where(col(DigimonRow.name).ilike(f"%{_escape_like(term)}%", escape="\\"))
                .order_by(DigimonRow.number, DigimonRow.id)
                .limit(limit)
            ).all()
        return Found([r.model_dump() for r in rows])

    def _linked(self, join_on: Any, match_on: Any, digimon_id: int) -> QueryResult:
        with Session(self._engine) as session:
            rows = session.exec(
                select(DigimonRow)
                .join(EvolutionRow, join_on == DigimonRow.id)
                .where(match_on == digimon_id)
                .order_by(DigimonRow.number, DigimonRow.id)
            ).all()
        return Found([r.model_dump() for r in rows])

    def _requirements(self, digimon_id: int) -> QueryResult:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text("SELECT * FROM requirements WHERE digimon_id = :digimon_id"),
                {"digimon_id": digimon_id},
            ).mappings().all()
        return Found([dict(r) for r in rows])

    def _count(self) -> QueryResult:
        with Session(self._engine) as session:
            total = session.exec(select(func.count()).select_from(DigimonRow)).one()
        return Found(total)

    def _count_by_stage(self) -> QueryResult:
        with self._engine.connect() as conn:
            rows = conn.execute(text(f"SELECT * FROM {self._stats_function}()")).mappings().all()
        return Found([dict(r) for r in rows])

    # -- DigimonStore ---------------------------------------------------------

    async def list_digimons(self, offset: int, limit: int, stage: str | None = None) -> QueryResult:
        return await self._run(self._list, offset, limit, stage)

    async def get_digimon_by_id(self, digimon_id: int) -> QueryResult:
        return await self._run(self._lookup, DigimonRow.id, digimon_id)

    async def get_digimon_by_name(self, name: str) -> QueryResult:
        return await self._run(self._lookup, DigimonRow.name, name)

    async def search_digimons(self, term: str, limit: int) -> QueryResult:
        return await self._run(self._search, term, limit)

    async def get_evolves_to(self, digimon_id: int) -> QueryResult:
        return await self._run(
            self._linked, EvolutionRow.to_digimon_id, EvolutionRow.from_digimon_id, digimon_id
        )

    async def get_evolves_from(self, digimon_id: int) -> QueryResult:
        return await self._run(
            self._linked, EvolutionRow.from_digimon_id, EvolutionRow.to_digimon_id, digimon_id
        )

    async def get_requirements(self, digimon_id: int) -> QueryResult:
        return await self._run(self._requirements, digimon_id)

    async def count_digimons(self) -> QueryResult:
        return await self._run(self._count)

    async def count_by_stage(self) -> QueryResult:
        return await self._run(self._count_by_stage)


# ---------------------------------------------------------------------------
# Singleton accessor
# ---------------------------------------------------------------------------

_store: DigimonStore | None = None


def get_store() -> DigimonStore:
    """Return the singleton ``DigimonStore`` instance."""
    global _store
    if _store is None:
        if settings.DATABASE_URL:
            logger.info("Using SQLDigimonStore")
            _store = SQLDigimonStore(get_engine(), settings.STATS_FUNCTION)
        else:
            logger.info("Using InMemoryDigimonStore (DATABASE_URL not set)")
            _store = InMemoryDigimonStore.from_seed(settings.SEED_FILE)
    return _store
