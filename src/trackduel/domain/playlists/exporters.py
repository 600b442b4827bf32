"""
Playlist export functionality for trackduel.
Writes one or many tournaments to the JSON exchange format (version 1.0).
"""

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from loguru import logger

from ..tournament.models import Battle, Track, Tournament
from .schemas import (
    EXPORT_VERSION,
    BattleRecord,
    ExportDocument,
    PlaylistRecord,
    TrackRecord,
)


def track_to_record(track: Track) -> TrackRecord:
    return TrackRecord(
        id=track.id,
        name=track.name,
        artist=track.artist,
        album=track.album,
        preview_url=track.preview_url,
        image_url=track.image_url,
        duration=track.duration,
        wins=track.wins,
        losses=track.losses,
        battles=track.battles,
        score=track.score,
    )


def battle_to_record(battle: Battle) -> BattleRecord:
    """Convert a battle, embedding the winner as a full track snapshot."""
    winner = None
    if battle.winner_id is not None:
        side = battle.track_a if battle.winner_id == battle.track_a.id else battle.track_b
        winner = track_to_record(side)
    return BattleRecord(
        id=battle.id,
        track1=track_to_record(battle.track_a),
        track2=track_to_record(battle.track_b),
        winner=winner,
        timestamp=battle.timestamp,
    )


def tournament_to_record(tournament: Tournament) -> PlaylistRecord:
    return PlaylistRecord(
        id=tournament.id,
        name=tournament.name,
        tracks=[track_to_record(track) for track in tournament.tracks],
        battles=[battle_to_record(battle) for battle in tournament.battles],
        is_complete=tournament.is_complete,
        created_at=tournament.created_at,
        updated_at=tournament.updated_at,
    )


def build_export(tournaments: Sequence[Tournament], single: bool = True) -> dict[str, Any]:
    """
    Build the exchange document for one or many playlists.

    Args:
        tournaments: Playlists to export
        single: Use the single-playlist layout when exactly one is given

    Returns:
        JSON-ready dict with camelCase keys

    Raises:
        ValueError: If no playlists are given
    """
    if not tournaments:
        raise ValueError("Nothing to export")

    records = [tournament_to_record(t) for t in tournaments]
    exported_at = datetime.now(timezone.utc)
    if single and len(records) == 1:
        document = ExportDocument(
            version=EXPORT_VERSION, exported_at=exported_at, playlist=records[0]
        )
    else:
        document = ExportDocument(
            version=EXPORT_VERSION, exported_at=exported_at, playlists=records
        )
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


def export_filename(playlist_name: str) -> str:
    """File name for a single-playlist export: trackduel-<slug>.json."""
    slug = re.sub(r"[^a-z0-9]", "_", playlist_name, flags=re.IGNORECASE).lower()
    return f"trackduel-{slug}.json"


def export_all_filename() -> str:
    """File name for a multi-playlist export: trackduel-all-playlists-<date>.json."""
    return f"trackduel-all-playlists-{datetime.now().strftime('%Y-%m-%d')}.json"


def write_export(
    output_path: Path,
    tournaments: Sequence[Tournament],
    indent: int = 2,
    single: bool = True,
) -> int:
    """
    Write playlists to a JSON file.

    Args:
        output_path: Destination file (parent directories are created)
        tournaments: Playlists to export
        indent: JSON indentation
        single: Use the single-playlist layout when exactly one is given

    Returns:
        Number of playlists written
    """
    data = build_export(tournaments, single=single)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)
        f.write("\n")

    logger.info(f"Exported {len(tournaments)} playlist(s) to {output_path}")
    return len(tournaments)
