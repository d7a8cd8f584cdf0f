"""
Dataset — immutable, header-fixed collection of records backed by pandas.

Constructors copy their input, so analytics always work on a snapshot and
never on a reference into the caller's mutable state.
"""
from __future__ import annotations

from typing import Iterable, Iterator, Mapping, Sequence

import pandas as pd


def frame_column(df: pd.DataFrame, name: str | None) -> pd.Series:
    """One column of a frame, or an all-None Series when it does not exist."""
    if name is not None and name in df.columns:
        return df[name]
    return pd.Series([None] * len(df), index=df.index, dtype=object)


def _nulls_to_none(df: pd.DataFrame) -> pd.DataFrame:
    df = df.astype(object)
    return df.where(df.notna(), None)


class Dataset:
    """Ordered records sharing one header. Missing cells are None."""

    def __init__(self, frame: pd.DataFrame) -> None:
        frame = _nulls_to_none(frame.copy())
        frame.index = pd.RangeIndex(len(frame))
        self._frame = frame

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping],
        columns: Sequence[str] | None = None,
    ) -> "Dataset":
        """Build from mappings. The first record's keys define the header unless given."""
        rows = [dict(r) for r in records]
        if columns is None:
            columns = list(rows[0].keys()) if rows else []
        columns = list(columns)
        frame = (
            pd.DataFrame(rows, columns=columns, dtype=object)
            if rows
            else pd.DataFrame(columns=columns, dtype=object)
        )
        return cls(frame)

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "Dataset":
        return cls(df)

    @classmethod
    def empty(cls) -> "Dataset":
        return cls(pd.DataFrame())

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self._frame.columns)

    @property
    def frame(self) -> pd.DataFrame:
        """A copy of the backing frame; mutating it never touches the dataset."""
        return self._frame.copy()

    def __len__(self) -> int:
        return len(self._frame)

    def __iter__(self) -> Iterator[dict]:
        return iter(self.records())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Dataset):
            return NotImplemented
        return self.columns == other.columns and self.records() == other.records()

    def __repr__(self) -> str:
        return f"Dataset(rows={len(self)}, columns={list(self.columns)})"

    @property
    def is_empty(self) -> bool:
        return len(self._frame) == 0

    def records(self) -> list[dict]:
        """Fresh dict copies of every record, in order."""
        return self._frame.to_dict("records")

    def first(self) -> dict | None:
        if self.is_empty:
            return None
        return self._frame.iloc[0].to_dict()

    def column(self, name: str) -> pd.Series:
        """Copy of one column (all-None when the column does not exist)."""
        return frame_column(self._frame, name).copy()

    def subset(self, mask: pd.Series) -> "Dataset":
        """New Dataset with the rows selected by a boolean mask (same header)."""
        return Dataset(self._frame[mask.to_numpy(dtype=bool)])
