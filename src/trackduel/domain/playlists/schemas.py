"""Pydantic models for the playlist exchange document (version 1.0)."""

from datetime import datetime
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

EXPORT_VERSION = "1.0"


def _coerce_id(value: Any) -> Any:
    # Catalog ids are sometimes numeric
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


Identifier = Annotated[str, BeforeValidator(_coerce_id)]


class TrackRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Identifier
    name: str
    artist: str = ""
    album: str = ""
    preview_url: str = ""
    image_url: str = ""
    duration: Optional[int] = None
    wins: int = 0
    losses: int = 0
    battles: int = 0
    score: float = 0.0

    @field_validator("artist", "album", "preview_url", "image_url", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class BattleRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Identifier
    track1: TrackRecord
    track2: TrackRecord
    winner: Optional[Union[TrackRecord, str]] = None
    timestamp: datetime

    @field_validator("winner", mode="before")
    @classmethod
    def _coerce_winner(cls, value: Any) -> Any:
        return _coerce_id(value)

    @property
    def winner_id(self) -> Optional[str]:
        if self.winner is None:
            return None
        if isinstance(self.winner, TrackRecord):
            return self.winner.id
        return self.winner


class PlaylistRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Identifier
    name: str
    tracks: list[TrackRecord] = Field(default_factory=list)
    battles: list[BattleRecord] = Field(default_factory=list)
    is_complete: bool = Field(default=False, alias="isComplete")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class ExportDocument(BaseModel):
    """One playlist (`playlist`) or many (`playlists`), never neither."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    version: str
    exported_at: Optional[datetime] = Field(default=None, alias="exportedAt")
    playlist: Optional[PlaylistRecord] = None
    playlists: Optional[list[PlaylistRecord]] = None

    def records(self) -> list[PlaylistRecord]:
        if self.playlist is not None:
            return [self.playlist]
        return list(self.playlists or [])
