"""Pydantic models for Digimon data and response envelopes."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class Stage(str, Enum):
    """Evolution stages accepted by the ``stage`` list filter."""

    I = "I"
    II = "II"
    III = "III"
    IV = "IV"
    V = "V"
    VI = "VI"
    VI_PLUS = "VI+"
    ARMOR = "Armor"
    HUMAN_HYBRID = "Human Hybrid"
    BEAST_HYBRID = "Beast Hybrid"
    FUSION_HYBRID = "Fusion Hybrid"
    GOLDEN_ARMOR = "Golden Armor"
    TRANSCENDENT_HYBRID = "Transcendent Hybrid"
    UNKNOWN = "Unknown"
    NOT_APPLICABLE = "N/A"


class Digimon(BaseModel):
    """Public projection of a stored Digimon record."""

    id: int = Field(..., description="Numeric Digimon ID")
    number: Optional[int] = Field(None, description="Ordinal number in the catalogue")
    name: Optional[str] = Field(None, description="Digimon name")
    stage: Optional[str] = Field(None, description="Evolution stage")
    attribute: Optional[str] = Field(None, description="Attribute (Vaccine, Data, Virus, ...)")
    image_url: Optional[str] = Field(None, description="URL to Digimon image")


class Pagination(BaseModel):
    """Pagination metadata for list responses."""

    page: int
    limit: int
    total: int
    totalPages: int


class PaginatedDigimons(BaseModel):
    """A page of formatted Digimons plus its pagination metadata."""

    data: list[Digimon]
    pagination: Pagination


class EvolutionData(BaseModel):
    """A Digimon with its one-hop evolution graph and requirements."""

    digimon: Optional[Digimon] = None
    evolves_to: list[Digimon] = Field(default_factory=list)
    evolves_from: list[Digimon] = Field(default_factory=list)
    requirements: list[dict[str, Any]] = Field(default_factory=list)


class DigimonStats(BaseModel):
    """Aggregate counts over the whole catalogue."""

    total_digimons: int
    count_by_stage: list[dict[str, Any]]


class SuccessResponse(BaseModel):
    """Success envelope."""

    success: bool = True
    data: Any
    message: str


class DigimonResponse(SuccessResponse):
    data: Digimon


class DigimonListResponse(SuccessResponse):
    data: list[Digimon]


class EvolutionResponse(SuccessResponse):
    data: EvolutionData


class StatsResponse(SuccessResponse):
    data: DigimonStats


class PaginatedResponse(BaseModel):
    """Paginated success envelope."""

    success: bool = True
    data: list[Digimon]
    pagination: Pagination
    message: str


class ErrorResponse(BaseModel):
    """Error envelope."""

    success: bool = False
    error: str
    statusCode: int
