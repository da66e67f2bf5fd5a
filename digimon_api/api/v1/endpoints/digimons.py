"""Digimon API endpoints."""

import logging

from fastapi import APIRouter, Depends, Path, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from digimon_api.config import settings
from digimon_api.dependencies import get_digimon_service
from digimon_api.errors import NotFoundError, ValidationError
from digimon_api.models.digimon import (
    DigimonListResponse,
    DigimonResponse,
    ErrorResponse,
    EvolutionResponse,
    PaginatedResponse,
    Stage,
    StatsResponse,
)
from digimon_api.services.digimon_service import DigimonService
from digimon_api.utils.validation import (
    clamp_search_limit,
    sanitize_search_term,
    validate_pagination,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/digimons")
limiter = Limiter(key_func=get_remote_address)

NOT_FOUND_MESSAGE = "Digimon não encontrado"

_ERRORS = {400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
_LOOKUP_ERRORS = {404: {"model": ErrorResponse}, **_ERRORS}


@router.get(
    "",
    response_model=PaginatedResponse,
    responses=_ERRORS,
    tags=["Digimons"],
    summary="List Digimons",
    description="List all Digimons with pagination, optionally filtered by evolution stage.",
)
@limiter.limit(settings.RATE_LIMIT)
async def list_digimons(
    request: Request,
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(50, ge=1, le=100, description="Items per page"),
    stage: Stage | None = Query(None, description="Filter by evolution stage"),
    service: DigimonService = Depends(get_digimon_service),
) -> PaginatedResponse:
    """Get a page of Digimons ordered by number."""
    page, limit = validate_pagination(page, limit)
    result = await service.list_digimons(page, limit, stage.value if stage else None)
    logger.info(
        "Returning %d digimons (page=%d, limit=%d, stage=%s)",
        len(result.data), page, limit, stage.value if stage else None,
    )
    return PaginatedResponse(
        data=result.data,
        pagination=result.pagination,
        message="Digimons recuperados com sucesso",
    )


@router.get(
    "/search",
    response_model=DigimonListResponse,
    responses=_ERRORS,
    tags=["Digimons"],
    summary="Search Digimons by name",
    description="Case-insensitive substring search on Digimon names.",
)
@limiter.limit(settings.RATE_LIMIT)
async def search_digimons(
    request: Request,
    q: str = Query(..., min_length=1, max_length=100, description="Search term for the Digimon name"),
    limit: int = Query(10, ge=1, le=50, description="Maximum number of results"),
    service: DigimonService = Depends(get_digimon_service),
) -> DigimonListResponse:
    """Search Digimons whose name contains ``q``."""
    search_term = sanitize_search_term(q)
    if not search_term:
        raise ValidationError("Termo de busca é obrigatório")

    results = await service.search_digimons(search_term, clamp_search_limit(limit))
    return DigimonListResponse(data=results, message=f"{len(results)} Digimons encontrados")


@router.get(
    "/stats",
    response_model=StatsResponse,
    responses=_ERRORS,
    tags=["Digimons"],
    summary="Get Digimon statistics",
    description="Total Digimon count and count per evolution stage.",
)
@limiter.limit(settings.RATE_LIMIT)
async def digimon_stats(
    request: Request,
    service: DigimonService = Depends(get_digimon_service),
) -> StatsResponse:
    stats = await service.get_stats()
    return StatsResponse(data=stats, message="Estatísticas recuperadas com sucesso")


@router.get(
    "/name/{name}",
    response_model=DigimonResponse,
    responses=_LOOKUP_ERRORS,
    tags=["Digimons"],
    summary="Get Digimon by name",
    description="Retrieve a Digimon by its exact, case-sensitive name (URL-encoded).",
)
@limiter.limit(settings.RATE_LIMIT)
async def digimon_by_name(
    request: Request,
    name: str = Path(..., min_length=1, max_length=255, description="Exact Digimon name"),
    service: DigimonService = Depends(get_digimon_service),
) -> DigimonResponse:
    digimon = await service.get_digimon_by_name(name)
    if digimon is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return DigimonResponse(data=digimon, message="Digimon encontrado")


@router.get(
    "/{digimon_id}",
    response_model=DigimonResponse,
    responses=_LOOKUP_ERRORS,
    tags=["Digimons"],
    summary="Get Digimon by ID",
    description="Retrieve a Digimon by its numeric ID.",
)
@limiter.limit(settings.RATE_LIMIT)
async def digimon_by_id(
    request: Request,
    digimon_id: int = Path(..., ge=1, description="Numeric Digimon ID"),
    service: DigimonService = Depends(get_digimon_service),
) -> DigimonResponse:
    digimon = await service.get_digimon_by_id(digimon_id)
    if digimon is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return DigimonResponse(data=digimon, message="Digimon encontrado")


@router.get(
    "/{digimon_id}/evolutions",
    response_model=EvolutionResponse,
    responses=_LOOKUP_ERRORS,
    tags=["Evolutions"],
    summary="Get Digimon evolutions",
    description="Retrieve the pre-evolutions, next evolutions and evolution requirements of a Digimon.",
)
@limiter.limit(settings.RATE_LIMIT)
async def digimon_evolutions(
    request: Request,
    digimon_id: int = Path(..., ge=1, description="Numeric Digimon ID"),
    service: DigimonService = Depends(get_digimon_service),
) -> EvolutionResponse:
    evolution_data = await service.get_evolution_data(digimon_id)
    if evolution_data.digimon is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return EvolutionResponse(data=evolution_data, message="Dados de evolução recuperados")
