from __future__ import annotations

from collections.abc import Mapping, Sequence
import datetime as dt
from decimal import Decimal
import logging
from typing import Any

import numpy as np

from eventline.errors import InvalidInputError
from eventline.series import EventLabel, EventMarker, Sample, SeriesData, Snapshot, TimelineEvent


try:
    import pandas as pd
except ImportError:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

LOGGER = logging.getLogger(__name__)

_TIME_KEYS = ("timestamp", "x", "t", "d")
_VALUE_KEYS = ("value", "y", "v")
_SID_KEYS = ("snapshot_id", "sid", "id")
_DATE_KEYS = ("display_date", "d")
_LABEL_KEYS = ("labels", "l")
_NAME_KEYS = ("name", "n")


def normalize_series(raw: Any, *, label: str | None = None) -> SeriesData:
    if isinstance(raw, SeriesData):
        return raw
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise InvalidInputError(f"series must be a sequence of samples, got {type(raw)!r}")

    x = np.empty(len(raw), dtype=np.float64)
    y = np.empty(len(raw), dtype=np.float64)
    for i, item in enumerate(raw):
        sample = _coerce_sample(item, index=i)
        x[i] = sample.timestamp
        y[i] = np.nan if sample.value is None else sample.value

    if not np.all(np.isfinite(x)):
        raise InvalidInputError(f"series {label!r} contains a missing timestamp")
    if x.size > 1 and np.any(np.diff(x) < 0):
        raise InvalidInputError(f"series {label!r} is not sorted by timestamp")
    mask = np.isfinite(y)
    return SeriesData(x=x, y=y, mask=mask, label=label)


def normalize_snapshots(raw: Any) -> tuple[Snapshot, ...]:
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise InvalidInputError("snapshots must be a sequence")
    out: list[Snapshot] = []
    for i, item in enumerate(raw):
        if isinstance(item, Snapshot):
            out.append(item)
        elif isinstance(item, Mapping):
            sid = _first_key(item, _SID_KEYS, what=f"snapshot {i} id")
            date = _first_key(item, _DATE_KEYS, what=f"snapshot {i} date")
            out.append(Snapshot(snapshot_id=sid, display_date=str(date)))
        elif isinstance(item, Sequence) and not isinstance(item, (str, bytes)) and len(item) == 2:
            out.append(Snapshot(snapshot_id=item[0], display_date=str(item[1])))
        else:
            raise InvalidInputError(f"unsupported snapshot at index {i}: {item!r}")
    return tuple(out)


def normalize_events(raw: Any) -> tuple[TimelineEvent, ...]:
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise InvalidInputError("events must be a sequence")
    out: list[TimelineEvent] = []
    for i, item in enumerate(raw):
        if isinstance(item, TimelineEvent):
            out.append(item)
            continue
        if not isinstance(item, Mapping):
            raise InvalidInputError(f"unsupported event at index {i}: {item!r}")
        sid = _first_key(item, _SID_KEYS, what=f"event {i} snapshot id")
        ts = _coerce_timestamp(_first_key(item, _TIME_KEYS, what=f"event {i} timestamp"), what=f"event {i}")
        raw_labels = _first_key(item, _LABEL_KEYS, what=f"event {i} labels")
        out.append(TimelineEvent(snapshot_id=sid, timestamp=ts, labels=_coerce_labels(raw_labels, index=i)))

    for prev, cur in zip(out, out[1:]):
        if cur.timestamp < prev.timestamp:
            raise InvalidInputError("events must be sorted by timestamp")
    return tuple(out)


def merge_events(events: Sequence[TimelineEvent]) -> tuple[EventMarker, ...]:
    """Fold events that share a snapshot id into one marker with combined labels."""

    merged: dict[Any, EventMarker] = {}
    for event in events:
        current = merged.get(event.snapshot_id)
        if current is None:
            merged[event.snapshot_id] = EventMarker(
                snapshot_id=event.snapshot_id,
                timestamp=event.timestamp,
                labels=event.labels,
            )
            continue
        if current.timestamp != event.timestamp:
            raise InvalidInputError(
                f"events for snapshot {event.snapshot_id!r} have different timestamps: "
                f"{current.timestamp} != {event.timestamp}"
            )
        LOGGER.debug("merging event labels for snapshot %r", event.snapshot_id)
        merged[event.snapshot_id] = EventMarker(
            snapshot_id=current.snapshot_id,
            timestamp=current.timestamp,
            labels=current.labels + event.labels,
        )
    return tuple(merged.values())


def series_from_frame(frame: Any, *, time_column: str, metric_columns: Sequence[str] | None = None) -> tuple[list[SeriesData], list[str]]:
    if pd is None:
        raise InvalidInputError("pandas is required to read series from a DataFrame")
    if not isinstance(frame, pd.DataFrame):
        raise InvalidInputError("`frame` must be a pandas DataFrame")
    if time_column not in frame.columns:
        raise InvalidInputError(f"column not found: {time_column}")
    if metric_columns is None:
        metric_columns = [
            c for c in frame.columns if c != time_column and pd.api.types.is_numeric_dtype(frame[c])
        ]
    if not metric_columns:
        raise InvalidInputError("DataFrame has no numeric metric columns")

    times = [_coerce_timestamp(v, what=time_column) for v in frame[time_column].tolist()]
    series: list[SeriesData] = []
    for col in metric_columns:
        if col not in frame.columns:
            raise InvalidInputError(f"column not found: {col}")
        values = frame[col].tolist()
        series.append(
            normalize_series(
                [Sample(timestamp=t, value=_coerce_value(v, what=col)) for t, v in zip(times, values)],
                label=str(col),
            )
        )
    return series, [str(c) for c in metric_columns]


def _coerce_sample(item: Any, *, index: int) -> Sample:
    if isinstance(item, Sample):
        return Sample(
            timestamp=_coerce_timestamp(item.timestamp, what=f"sample {index}"),
            value=_coerce_value(item.value, what=f"sample {index}"),
        )
    if isinstance(item, Mapping):
        ts = _first_key(item, _TIME_KEYS, what=f"sample {index} timestamp")
        value = next((item[k] for k in _VALUE_KEYS if k in item), None)
        return Sample(
            timestamp=_coerce_timestamp(ts, what=f"sample {index}"),
            value=_coerce_value(value, what=f"sample {index}"),
        )
    if isinstance(item, Sequence) and not isinstance(item, (str, bytes)) and len(item) == 2:
        return Sample(
            timestamp=_coerce_timestamp(item[0], what=f"sample {index}"),
            value=_coerce_value(item[1], what=f"sample {index}"),
        )
    raise InvalidInputError(f"unsupported sample at index {index}: {item!r}")


def _coerce_timestamp(raw: Any, *, what: str) -> float:
    if pd is not None and isinstance(raw, pd.Timestamp):
        raw = raw.to_pydatetime()
    if isinstance(raw, np.datetime64):
        return float(raw.astype("datetime64[ms]").astype(np.int64)) / 1000.0
    if isinstance(raw, dt.datetime):
        if raw.tzinfo is None:
            raw = raw.replace(tzinfo=dt.timezone.utc)
        return raw.timestamp()
    if isinstance(raw, dt.date):
        return dt.datetime(raw.year, raw.month, raw.day, tzinfo=dt.timezone.utc).timestamp()
    if isinstance(raw, str):
        try:
            return _coerce_timestamp(dt.datetime.fromisoformat(raw), what=what)
        except ValueError as exc:
            raise InvalidInputError(f"{what} has an unparseable timestamp: {raw!r}") from exc
    if isinstance(raw, bool) or raw is None:
        raise InvalidInputError(f"{what} has an invalid timestamp: {raw!r}")
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{what} has an invalid timestamp: {raw!r}") from exc


def _coerce_value(raw: Any, *, what: str) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, Decimal):
        return float(raw)
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{what} has a non-numeric value: {raw!r}") from exc
    if not np.isfinite(value):
        return None
    return value


def _coerce_labels(raw: Any, *, index: int) -> tuple[EventLabel, ...]:
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise InvalidInputError(f"event {index} labels must be a sequence")
    labels: list[EventLabel] = []
    for item in raw:
        if isinstance(item, EventLabel):
            labels.append(item)
        elif isinstance(item, str):
            labels.append(EventLabel(name=item))
        elif isinstance(item, Mapping):
            labels.append(EventLabel(name=str(_first_key(item, _NAME_KEYS, what=f"event {index} label name"))))
        else:
            raise InvalidInputError(f"event {index} has an unsupported label: {item!r}")
    if not labels:
        raise InvalidInputError(f"event {index} has no labels")
    return tuple(labels)


def _first_key(item: Mapping[str, Any], keys: Sequence[str], *, what: str) -> Any:
    for key in keys:
        if key in item:
            return item[key]
    raise InvalidInputError(f"{what} is missing (expected one of {', '.join(keys)})")
