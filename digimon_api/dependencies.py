"""Shared FastAPI dependencies."""

from fastapi import Depends

from digimon_api.db.digimon_store import DigimonStore, get_store
from digimon_api.services.digimon_service import DigimonService


async def get_digimon_service(
    store: DigimonStore = Depends(get_store),
) -> DigimonService:
    """Build the query service around the configured store.

    Tests swap the store by overriding ``get_store`` on the app.
    """
    return DigimonService(store)
