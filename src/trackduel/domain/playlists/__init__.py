"""Playlists domain - JSON import/export of tournaments and CSV track lists.

This domain handles:
- Export of one or many playlists to the versioned JSON exchange format
- Import with validation (strict) or repair (lenient) of drifted statistics
- Reading track lists from CSV files
"""

from .schemas import EXPORT_VERSION, ExportDocument, PlaylistRecord, TrackRecord, BattleRecord
from .exporters import (
    build_export,
    export_all_filename,
    export_filename,
    tournament_to_record,
    write_export,
)
from .importers import load_export, load_tracks_csv, parse_export, record_to_tournament

__all__ = [
    # Schemas
    "EXPORT_VERSION",
    "ExportDocument",
    "PlaylistRecord",
    "TrackRecord",
    "BattleRecord",
    # Export
    "build_export",
    "export_filename",
    "export_all_filename",
    "tournament_to_record",
    "write_export",
    # Import
    "parse_export",
    "load_export",
    "load_tracks_csv",
    "record_to_tournament",
]
