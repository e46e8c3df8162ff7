from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

import numpy as np

from animated_linechart.errors import ChartDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


@dataclass(frozen=True)
class RawSeries:
    x: np.ndarray
    y: np.ndarray
    mask: np.ndarray
    timestamps: tuple[datetime, ...] | None = None

    @property
    def dropped(self) -> int:
        return int(self.mask.size - np.count_nonzero(self.mask))


def normalize_series(raw: Any, *, label: str = "series") -> RawSeries:
    """Coerce one raw series (mapping, pairs, or pandas Series) into x/y arrays.

    Date keys become POSIX seconds; naive datetimes are read as UTC. The mask
    flags entries whose x and y are both finite.
    """
    if pd is not None and isinstance(raw, pd.Series):
        keys = _pandas_index_keys(raw)
        values = raw.to_list()
    elif isinstance(raw, Mapping):
        keys = list(raw.keys())
        values = list(raw.values())
    elif isinstance(raw, Sequence) and not isinstance(raw, (str, bytes, bytearray)):
        keys, values = _split_pairs(raw, label=label)
    elif isinstance(raw, np.ndarray):
        if raw.ndim != 2 or raw.shape[1] != 2:
            raise ChartDataError(f"{label} array must have shape (N, 2)")
        keys = raw[:, 0].tolist()
        values = raw[:, 1].tolist()
    else:
        raise ChartDataError(f"unsupported {label} input type: {type(raw)!r}")

    x, timestamps = _coerce_keys(keys, label=label)
    y = _coerce_values(values, label=label)
    mask = np.isfinite(x) & np.isfinite(y)
    return RawSeries(x=x, y=y, mask=mask, timestamps=timestamps)


def to_posix_seconds(value: datetime | date) -> float:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp()


def _split_pairs(raw: Sequence[Any], *, label: str) -> tuple[list[Any], list[Any]]:
    keys: list[Any] = []
    values: list[Any] = []
    for i, item in enumerate(raw):
        try:
            k, v = item
        except (TypeError, ValueError) as exc:
            raise ChartDataError(f"{label} entry {i} is not an (x, y) pair: {item!r}") from exc
        keys.append(k)
        values.append(v)
    return keys, values


def _pandas_index_keys(raw: Any) -> list[Any]:
    if isinstance(raw.index, pd.DatetimeIndex):
        return list(raw.index.to_pydatetime())
    return raw.index.to_list()


def _coerce_keys(keys: list[Any], *, label: str) -> tuple[np.ndarray, tuple[datetime, ...] | None]:
    out = np.empty(len(keys), dtype=np.float64)
    dated = [_as_datetime(k) for k in keys]
    n_dated = sum(1 for d in dated if d is not None)
    if n_dated and n_dated != len(keys):
        raise ChartDataError(f"{label} mixes date and numeric keys")
    if n_dated:
        for i, dt in enumerate(dated):
            assert dt is not None
            out[i] = to_posix_seconds(dt)
        return out, tuple(d for d in dated if d is not None)
    for i, raw in enumerate(keys):
        out[i] = _as_float(raw, label=f"{label} key", index=i)
    return out, None


def _coerce_values(values: list[Any], *, label: str) -> np.ndarray:
    out = np.empty(len(values), dtype=np.float64)
    for i, raw in enumerate(values):
        out[i] = _as_float(raw, label=f"{label} value", index=i)
    return out


def _as_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        if pd is not None and isinstance(value, pd.Timestamp):
            return value.to_pydatetime()
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, np.datetime64):
        return value.astype("datetime64[us]").astype(datetime)
    return None


def _as_float(raw: Any, *, label: str, index: int) -> float:
    if raw is None:
        return float("nan")
    if isinstance(raw, Decimal):
        return float(raw)
    if isinstance(raw, (bool, np.bool_)):
        raise ChartDataError(f"{label} at index {index} is boolean: {raw!r}")
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"{label} at index {index} is not numeric: {raw!r}") from exc
