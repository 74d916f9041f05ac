from .normalize import merge_events, normalize_events, normalize_series, normalize_snapshots, series_from_frame

__all__ = [
    "merge_events",
    "normalize_events",
    "normalize_series",
    "normalize_snapshots",
    "series_from_frame",
]
