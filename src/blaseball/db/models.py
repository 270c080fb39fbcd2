"""Snapshot schemas for players, teams and ingestion records."""

from typing import Annotated, Literal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Endpoint:
    """Ingestion record tags."""

    PLAYERS = "players"
    ALL_TEAMS = "allTeams"


class _Snapshot(BaseModel):
    """Base for camelCase wire snapshots keyed by `id` or `_id`."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: UUID = Field(validation_alias=AliasChoices("id", "_id"))


class Player(_Snapshot):
    """Player rating snapshot.

    Ratings are nominally in [0, 1] but are not clamped; daily mood
    adjustments can push them outside that range.
    """

    name: str
    anticapitalism: float
    base_thirst: float
    buoyancy: float
    chasiness: float
    cinnamon: float
    coldness: float
    continuation: float
    divinity: float
    ground_friction: float
    indulgence: float
    laserlikeness: float
    martyrdom: float
    moxie: float
    musclitude: float
    omniscience: float
    overpowerment: float
    patheticism: float
    pressurization: float
    ruthlessness: float
    shakespearianism: float
    tenaciousness: float
    thwackability: float
    tragicness: float
    unthwackability: float
    watchfulness: float

    def __repr__(self) -> str:
        return f"Player(id={self.id}, name={self.name!r})"


class Team(_Snapshot):
    """Team roster snapshot."""

    nickname: str
    lineup: Annotated[list[UUID], Field(min_length=9, max_length=9)]
    rotation: Annotated[list[UUID], Field(min_length=5, max_length=5)]

    @field_validator("lineup")
    @classmethod
    def validate_lineup_unique(cls, v: list[UUID]) -> list[UUID]:
        if len(set(v)) != len(v):
            raise ValueError("lineup ids must be unique")
        return v


class ClientMeta(BaseModel):
    timestamp: int  # epoch ms the batch was captured


class PlayersRecord(BaseModel):
    """`players` endpoint batch."""

    endpoint: Literal["players"]
    data: list[Player]
    client_meta: ClientMeta = Field(alias="clientMeta")


class AllTeamsRecord(BaseModel):
    """`allTeams` endpoint batch."""

    endpoint: Literal["allTeams"]
    data: list[Team]
    client_meta: ClientMeta = Field(alias="clientMeta")


RECORD_TYPES: dict[str, type[BaseModel]] = {
    Endpoint.PLAYERS: PlayersRecord,
    Endpoint.ALL_TEAMS: AllTeamsRecord,
}
