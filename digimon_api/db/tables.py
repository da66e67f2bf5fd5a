"""SQLModel table definitions for the Digimon schema.

The tables are owned by the managed database; these classes only describe
the columns the API reads. ``requirements`` is left unmodelled because its
columns are passed through to clients untouched.
"""

from typing import Optional

from sqlmodel import Field, SQLModel


class DigimonRow(SQLModel, table=True):
    __tablename__ = "digimons"
    __table_args__ = {"extend_existing": True}

    id: int = Field(primary_key=True)
    number: Optional[int] = Field(default=None, index=True)
    name: str = Field(index=True)
    stage: Optional[str] = Field(default=None, index=True)
    attribute: Optional[str] = None
    image_url: Optional[str] = None


class EvolutionRow(SQLModel, table=True):
    __tablename__ = "evolutions"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    from_digimon_id: int = Field(foreign_key="digimons.id", index=True)
    to_digimon_id: int = Field(foreign_key="digimons.id", index=True)
