"""Tests for the SQL store against a file-backed SQLite database."""

import pytest
from sqlalchemy import text
from sqlmodel import Session, SQLModel, create_engine

from digimon_api.db.digimon_store import SQLDigimonStore
from digimon_api.db.results import Absent, Failed, Found
from digimon_api.db.tables import DigimonRow, EvolutionRow
from digimon_api.services.digimon_service import DigimonService

DIGIMONS = [
    DigimonRow(id=1, number=2, name="Koromon", stage="II", attribute="No Data", image_url="k.png"),
    DigimonRow(id=2, number=1, name="Botamon", stage="I", attribute="No Data", image_url="b.png"),
    DigimonRow(id=3, number=3, name="Agumon", stage="III", attribute="Vaccine", image_url="a.png"),
    DigimonRow(id=4, number=4, name="Greymon", stage="IV", attribute="Vaccine", image_url="g.png"),
    DigimonRow(id=5, number=5, name="Gabumon", stage="III", attribute="Data", image_url="gb.png"),
    DigimonRow(id=6, number=6, name="Gabumon", stage="III", attribute="Data", image_url="gb2.png"),
]

EVOLUTIONS = [
    EvolutionRow(from_digimon_id=2, to_digimon_id=1),
    EvolutionRow(from_digimon_id=1, to_digimon_id=3),
    EvolutionRow(from_digimon_id=3, to_digimon_id=4),
]


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'digimons.db'}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all([DigimonRow(**d.model_dump()) for d in DIGIMONS])
        session.add_all([EvolutionRow(**e.model_dump()) for e in EVOLUTIONS])
        session.commit()
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE requirements (id INTEGER PRIMARY KEY, digimon_id INTEGER, "
            "kind TEXT, detail TEXT)"
        ))
        conn.execute(text(
            "INSERT INTO requirements (digimon_id, kind, detail) VALUES "
            "(4, 'level', '20'), (4, 'friendship', '50%'), (3, 'level', '10')"
        ))
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> SQLDigimonStore:
    return SQLDigimonStore(engine)


class TestSQLDigimonStore:

    @pytest.mark.asyncio
    async def test_list_orders_by_number_and_counts(self, store):
        result = await store.list_digimons(offset=0, limit=3)
        assert isinstance(result, Found)
        rows, total = result.value
        assert [r["name"] for r in rows] == ["Botamon", "Koromon", "Agumon"]
        assert total == 6

    @pytest.mark.asyncio
    async def test_list_with_stage_counts_filtered_rows(self, store):
        rows, total = (await store.list_digimons(offset=1, limit=10, stage="III")).value
        assert total == 3
        assert [r["id"] for r in rows] == [5, 6]

    @pytest.mark.asyncio
    async def test_get_by_id(self, store):
        result = await store.get_digimon_by_id(3)
        assert isinstance(result, Found)
        assert result.value["name"] == "Agumon"

    @pytest.mark.asyncio
    async def test_get_by_id_absent(self, store):
        assert isinstance(await store.get_digimon_by_id(99), Absent)

    @pytest.mark.asyncio
    async def test_get_by_name_duplicate_is_absent(self, store):
        assert isinstance(await store.get_digimon_by_name("Gabumon"), Absent)
        assert (await store.get_digimon_by_name("Greymon")).value["id"] == 4

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, store):
        rows = (await store.search_digimons("MON", limit=3)).value
        assert [r["name"] for r in rows] == ["Botamon", "Koromon", "Agumon"]

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(self, engine, store):
        with Session(engine) as session:
            session.add_all([
                DigimonRow(id=7, number=7, name="Gabu_mon", stage="III"),
                DigimonRow(id=8, number=8, name="100%mon", stage="III"),
            ])
            session.commit()

        assert [r["name"] for r in (await store.search_digimons("_", limit=10)).value] == ["Gabu_mon"]
        assert [r["name"] for r in (await store.search_digimons("%", limit=10)).value] == ["100%mon"]
        assert (await store.search_digimons("\\", limit=10)).value == []

    @pytest.mark.asyncio
    async def test_evolution_edges_join_records(self, store):
        assert [r["name"] for r in (await store.get_evolves_to(1)).value] == ["Agumon"]
        assert [r["name"] for r in (await store.get_evolves_from(1)).value] == ["Botamon"]
        assert (await store.get_evolves_to(4)).value == []

    @pytest.mark.asyncio
    async def test_requirements_pass_through_all_columns(self, store):
        rows = (await store.get_requirements(4)).value
        assert {r["kind"] for r in rows} == {"level", "friendship"}
        assert set(rows[0]) == {"id", "digimon_id", "kind", "detail"}

    @pytest.mark.asyncio
    async def test_count(self, store):
        assert (await store.count_digimons()).value == 6

    @pytest.mark.asyncio
    async def test_missing_procedure_is_failed(self, store):
        result = await store.count_by_stage()
        assert isinstance(result, Failed)

    @pytest.mark.asyncio
    async def test_missing_table_is_failed(self, engine):
        with engine.begin() as conn:
            conn.execute(text("DROP TABLE requirements"))
        result = await SQLDigimonStore(engine).get_requirements(4)
        assert isinstance(result, Failed)


class TestServiceOverSQL:

    @pytest.mark.asyncio
    async def test_evolution_data(self, store):
        data = await DigimonService(store).get_evolution_data(3)
        assert data.digimon.name == "Agumon"
        assert [d.name for d in data.evolves_to] == ["Greymon"]
        assert [d.name for d in data.evolves_from] == ["Koromon"]
        assert data.requirements == [{"id": 3, "digimon_id": 3, "kind": "level", "detail": "10"}]

    @pytest.mark.asyncio
    async def test_list_pagination(self, store):
        result = await DigimonService(store).list_digimons(page=2, limit=4)
        assert [d.id for d in result.data] == [5, 6]
        assert result.pagination.totalPages == 2
