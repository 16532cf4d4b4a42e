# motionfeatures/core/table.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

from .exceptions import InvalidFeatureTable

OK_MARKER = "None"
SENSORS: tuple[str, ...] = ("accelerometer", "gyroscope")
ERROR_SEPARATOR = "; "


def join_errors(*reasons: str | None) -> str | None:
    """Combine error reasons, skipping empty ones and duplicates."""
    kept: list[str] = []
    for r in reasons:
        if r and r != OK_MARKER and r not in kept:
            kept.append(r)
    return ERROR_SEPARATOR.join(kept) if kept else None


@dataclass(frozen=True, slots=True)
class FeatureRecord:
    """
    One row of a feature table: the features of one axis of one window.

    An error-marker row has `error` set and no axis, window or features.
    """
    sensor: str | None = None
    axis: str | None = None
    window: int | None = None
    features: Mapping[str, float] = field(default_factory=dict)
    error: str | None = None

    def __post_init__(self) -> None:
        if self.sensor is not None and self.sensor not in SENSORS:
            raise InvalidFeatureTable(f"Unknown sensor '{self.sensor}'.")
        if self.window is not None and (
            isinstance(self.window, bool) or not isinstance(self.window, int) or self.window < 0
        ):
            raise InvalidFeatureTable("FeatureRecord.window must be an integer >= 0.")
        if self.features is None:
            object.__setattr__(self, "features", {})
        elif not isinstance(self.features, Mapping):
            raise InvalidFeatureTable("FeatureRecord.features must be a mapping.")
        else:
            object.__setattr__(self, "features", dict(self.features))
        if self.error is not None and not isinstance(self.error, str):
            raise InvalidFeatureTable("FeatureRecord.error must be a string or None.")

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_marker(self) -> bool:
        return self.error is not None and self.window is None and self.axis is None

    def replace(self, **changes: Any) -> "FeatureRecord":
        values = {
            "sensor": self.sensor,
            "axis": self.axis,
            "window": self.window,
            "features": dict(self.features),
            "error": self.error,
        }
        values.update(changes)
        return FeatureRecord(**values)


@dataclass(frozen=True, slots=True)
class FeatureTable:
    """
    Ordered, immutable collection of FeatureRecords.

    Either a complete table (one record per requested axis/window) or a
    single error-marker row. Transformations return a new table.
    """
    records: tuple[FeatureRecord, ...] = ()

    def __post_init__(self) -> None:
        records = tuple(self.records)
        for r in records:
            if not isinstance(r, FeatureRecord):
                raise InvalidFeatureTable("FeatureTable.records must be FeatureRecord instances.")
        object.__setattr__(self, "records", records)

    @classmethod
    def error_table(cls, reason: str, sensor: str | None = None) -> "FeatureTable":
        if not isinstance(reason, str) or not reason.strip():
            raise InvalidFeatureTable("An error table needs a non-empty reason.")
        return cls(records=(FeatureRecord(sensor=sensor, error=reason),))

    @classmethod
    def concat(cls, tables: Iterable["FeatureTable"]) -> "FeatureTable":
        records: list[FeatureRecord] = []
        for table in tables:
            if not isinstance(table, FeatureTable):
                raise InvalidFeatureTable("concat() expects FeatureTable instances.")
            records.extend(table.records)
        return cls(records=tuple(records))

    # ---- sequence API ----
    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[FeatureRecord]:
        return iter(self.records)

    def __getitem__(self, i: int) -> FeatureRecord:
        return self.records[i]

    # ---- inspection ----
    @property
    def is_error(self) -> bool:
        """True if any row is a whole-branch error marker."""
        return any(r.is_marker for r in self.records)

    @property
    def errors(self) -> list[str]:
        return [r.error for r in self.records if r.error is not None]

    @property
    def sensors(self) -> list[str]:
        out: list[str] = []
        for r in self.records:
            if r.sensor is not None and r.sensor not in out:
                out.append(r.sensor)
        return out

    @property
    def windows(self) -> list[int]:
        return sorted({r.window for r in self.records if r.window is not None})

    @property
    def feature_names(self) -> list[str]:
        names: dict[str, None] = {}
        for r in self.records:
            for k in r.features:
                names.setdefault(k, None)
        return list(names)

    @property
    def columns(self) -> list[str]:
        return ["sensor", "axis", "window", *self.feature_names, "error"]

    # ---- transformations ----
    def with_sensor(self, sensor: str) -> "FeatureTable":
        return FeatureTable(records=tuple(r.replace(sensor=sensor) for r in self.records))

    def select(self, sensor: str) -> "FeatureTable":
        return FeatureTable(records=tuple(r for r in self.records if r.sensor == sensor))

    def annotate(self, annotations: Mapping[int, str | None]) -> "FeatureTable":
        """
        Left-join per-window annotations onto every row by window index.

        A row keeps its own error (e.g. a failed feature function) and gains
        the window's annotation alongside it. Windows absent from
        `annotations` are ok.
        """
        out = []
        for r in self.records:
            tag = annotations.get(r.window) if r.window is not None else None
            out.append(r.replace(error=join_errors(r.error, tag)))
        return FeatureTable(records=tuple(out))

    def mark_ok(self) -> "FeatureTable":
        return self.annotate({})

    def to_rows(self) -> list[dict[str, Any]]:
        """Flatten to one dict per row with the columns of `columns`."""
        names = self.feature_names
        rows = []
        for r in self.records:
            row: dict[str, Any] = {"sensor": r.sensor, "axis": r.axis, "window": r.window}
            for name in names:
                row[name] = r.features.get(name, math.nan)
            row["error"] = OK_MARKER if r.error is None else r.error
            rows.append(row)
        return rows
