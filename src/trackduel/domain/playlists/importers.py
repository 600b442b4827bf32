"""
Playlist import functionality for trackduel.
Reads JSON exchange documents and track lists in CSV format.
"""

import csv
import json
import math
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Union

from loguru import logger
from pydantic import ValidationError

from ..tournament.errors import ImportFormatError, InconsistentStateError
from ..tournament.models import Battle, Track, Tournament, make_track
from ..tournament.reconcile import check_consistency, reconcile
from .schemas import BattleRecord, ExportDocument, PlaylistRecord, TrackRecord

TRACK_CSV_FIELDS = ("id", "name", "artist", "album", "image_url", "preview_url", "duration")


def record_to_track(record: TrackRecord) -> Track:
    return Track(
        id=record.id,
        name=record.name,
        artist=record.artist,
        album=record.album,
        image_url=record.image_url,
        preview_url=record.preview_url,
        duration=record.duration,
        wins=record.wins,
        losses=record.losses,
    )


def record_to_battle(record: BattleRecord) -> Battle:
    return Battle(
        id=record.id,
        track_a=record_to_track(record.track1),
        track_b=record_to_track(record.track2),
        timestamp=record.timestamp,
        winner_id=record.winner_id,
    )


def _stored_stat_problems(record: PlaylistRecord) -> list[str]:
    """Check the cached battles/score fields that Track derives itself."""
    problems = []
    for track in record.tracks:
        if track.battles != track.wins + track.losses:
            problems.append(
                f"track {track.id} stores {track.battles} battles "
                f"but {track.wins} wins and {track.losses} losses"
            )
        played = track.wins + track.losses
        expected = track.wins / played if played else 0.0
        if not math.isclose(track.score, expected, abs_tol=1e-9):
            problems.append(f"track {track.id} stores score {track.score}, expected {expected}")
    return problems


def _repair(tournament: Tournament) -> Tournament:
    """Drop unfinished and repeated battles, then replay every statistic."""
    seen = set()
    kept = []
    for battle in tournament.battles:
        if battle.winner_id is None or not battle.involves(battle.winner_id):
            continue
        if battle.track_ids in seen or len(battle.track_ids) != 2:
            continue
        seen.add(battle.track_ids)
        kept.append(battle)
    return reconcile(replace(tournament, battles=tuple(kept)), tournament.tracks)


def record_to_tournament(record: PlaylistRecord, strict: bool = True) -> Tournament:
    """
    Convert a playlist record, checking its statistics against its battle log.

    Args:
        record: Parsed playlist record
        strict: Raise on drift instead of repairing it

    Returns:
        Tournament

    Raises:
        InconsistentStateError: If strict and the stored statistics disagree
        DuplicateTrackIdError: If the record repeats a track id
    """
    tournament = Tournament(
        id=record.id,
        name=record.name,
        tracks=tuple(record_to_track(t) for t in record.tracks),
        battles=tuple(record_to_battle(b) for b in record.battles),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )

    problems = _stored_stat_problems(record) + check_consistency(tournament)
    if not problems:
        return tournament

    if strict:
        raise InconsistentStateError(record.id, problems)

    logger.warning(
        f"Repairing imported playlist {record.id}: {len(problems)} problem(s): "
        + "; ".join(problems)
    )
    return _repair(tournament)


def parse_export(data: Union[str, bytes, dict[str, Any]], strict: bool = True) -> list[Tournament]:
    """
    Parse an exchange document into tournaments.

    Args:
        data: Raw JSON text or an already decoded dict
        strict: Reject playlists whose statistics disagree with their battles

    Returns:
        List of tournaments (one for a single-playlist document)

    Raises:
        ImportFormatError: If the document is malformed or holds no playlists
        InconsistentStateError: If strict and a playlist has drifted
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ImportFormatError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict) or not data.get("version"):
        raise ImportFormatError("Invalid file format: missing version")

    try:
        document = ExportDocument.model_validate(data)
    except ValidationError as e:
        raise ImportFormatError(f"Invalid file format: {e}") from e

    if document.playlist is None and document.playlists is None:
        raise ImportFormatError("No playlist data found in file")

    return [record_to_tournament(r, strict=strict) for r in document.records()]


def load_export(path: Path, strict: bool = True) -> list[Tournament]:
    """Read and parse an exchange document from disk."""
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ImportFormatError(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise ImportFormatError(f"Could not read {path}: {e}") from e

    tournaments = parse_export(content, strict=strict)
    logger.info(f"Imported {len(tournaments)} playlist(s) from {path}")
    return tournaments


def _parse_duration(value: Optional[str], line: int) -> Optional[int]:
    if value is None or not value.strip():
        return None
    try:
        return int(float(value))
    except ValueError:
        raise ImportFormatError(f"Line {line}: invalid duration {value!r}") from None


def load_tracks_csv(path: Path) -> list[Track]:
    """
    Read a track list from CSV.

    Expected header: id,name[,artist,album,image_url,preview_url,duration].
    Only id and name are required.

    Raises:
        ImportFormatError: If the file is unreadable or a row is incomplete
    """
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            fieldnames = [name.strip() for name in (reader.fieldnames or [])]
            missing = {"id", "name"} - set(fieldnames)
            if missing:
                raise ImportFormatError(
                    f"{path}: missing required columns: {', '.join(sorted(missing))}"
                )
            reader.fieldnames = fieldnames

            tracks = []
            # Line 1 is the header
            for line, row in enumerate(reader, start=2):
                track_id = (row.get("id") or "").strip()
                name = (row.get("name") or "").strip()
                if not track_id or not name:
                    raise ImportFormatError(f"{path} line {line}: id and name are required")
                tracks.append(
                    make_track(
                        id=track_id,
                        name=name,
                        artist=(row.get("artist") or "").strip(),
                        album=(row.get("album") or "").strip(),
                        image_url=(row.get("image_url") or "").strip(),
                        preview_url=(row.get("preview_url") or "").strip(),
                        duration=_parse_duration(row.get("duration"), line),
                    )
                )
    except UnicodeDecodeError as e:
        raise ImportFormatError(
            f"{path} is not valid UTF-8 (re-save the CSV as UTF-8): {e}"
        ) from e
    except OSError as e:
        raise ImportFormatError(f"Could not read {path}: {e}") from e

    logger.debug(f"Loaded {len(tracks)} tracks from {path}")
    return tracks
