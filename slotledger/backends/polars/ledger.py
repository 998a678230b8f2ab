"""
slotledger.backends.polars.ledger
=================================

A concrete **Polars-backed** journal with JSON-UTF8 payload.
No persistence here (see `slotledger.backends.polars.io`).

- Inherits `JournalOps` to expose the typed DSL as native methods.
- Implements `append()` and a `LedgerReader`.
- Appends are buffered as plain rows and concatenated into the frame once,
  on the next read, so a long session appends in linear time.

Examples
--------
>>> from slotledger.backends.polars.ledger import PolarsJournal
>>> from slotledger.core.names import Namespace
>>> J = PolarsJournal()
>>> J.write_event(block_height=2, namespace=Namespace.CALLS, kind="ok",
...               entity="ST1.accumulator", sender="ST1",
...               payload_type="CallOutcome", payload={"function": "set-values"})
>>> J.reader().count(namespace=Namespace.CALLS.value)
1
"""

from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, cast

import ibis
import polars as pl

from slotledger.__version__ import __version__
from slotledger.core.ledger import (
    JOURNAL_COLUMNS,
    LedgerReader,
    NamespaceLike,
    PayloadTypeRegistry,
    Row,
    namespace_str,
)
from slotledger.core.traits import JournalOps

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


class PolarsJournal(JournalOps):
    """Polars-backed append-only journal with JSON-UTF8 payload column."""

    _SCHEMA = {
        "uuid": pl.Utf8,
        "ledger_name": pl.Utf8,
        "seq": pl.Int64,
        "block_height": pl.Int64,
        "ts": pl.Datetime(time_unit="us", time_zone="UTC"),
        "namespace": pl.Utf8,
        "kind": pl.Utf8,
        "entity": pl.Utf8,  # contract identifier
        "sender": pl.Utf8,  # caller principal
        "tag": pl.Utf8,
        "payload_type": pl.Utf8,
        "payload": pl.Utf8,  # JSON string
        "slotledger_version": pl.Utf8,
    }

    def __init__(
        self, df: Optional[pl.DataFrame] = None, ledger_name: str = "default"
    ) -> None:
        self.ledger_name = ledger_name
        self._df = pl.DataFrame(schema=cast(Any, self._SCHEMA))
        # Appended rows wait here until a read materializes them into ``_df``.
        self._pending: List[Dict[str, Any]] = []
        if df is not None:
            self.replace_with_frame(df)

    def __len__(self) -> int:
        return self._df.height + len(self._pending)

    # ---- LedgerBase interface ----

    def append(
        self,
        *,
        block_height: int,
        ts: datetime,
        namespace: NamespaceLike,
        kind: str,
        entity: str,
        sender: str,
        payload_type: str,
        payload: Any,
        tag: Optional[str] = None,
    ) -> "PolarsJournal":
        block_height = int(block_height)
        if not _INT64_MIN <= block_height <= _INT64_MAX:
            raise ValueError(f"block_height {block_height} does not fit the Int64 column")
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        else:
            ts = ts.astimezone(timezone.utc)
        self._pending.append(
            {
                "uuid": str(uuid.uuid4()),
                "ledger_name": self.ledger_name,
                "seq": len(self),
                "block_height": block_height,
                "ts": ts,
                "namespace": namespace_str(namespace),
                "kind": kind,
                "entity": entity,
                "sender": sender,
                "tag": tag or "",
                "payload_type": payload_type,
                "payload": PayloadTypeRegistry.wrap(payload_type, payload),
                "slotledger_version": __version__,
            }
        )
        return self

    def _materialize(self) -> pl.DataFrame:
        if self._pending:
            batch = pl.from_dicts(self._pending, schema=cast(Any, self._SCHEMA))
            self._df = pl.concat([self._df, batch], how="vertical_relaxed")
            self._pending = []
        return self._df

    class _Reader(LedgerReader):
        def __init__(self, df: pl.DataFrame) -> None:
            self.df = df

        def _filter(
            self,
            *,
            namespace: Optional[Any] = None,
            kind: Optional[str] = None,
            entity: Optional[str] = None,
            tag: Optional[str] = None,
        ) -> pl.DataFrame:
            q = self.df
            if namespace is not None:
                q = q.filter(pl.col("namespace") == namespace_str(namespace))
            if kind is not None:
                q = q.filter(pl.col("kind") == kind)
            if entity is not None:
                q = q.filter(pl.col("entity") == entity)
            if tag is not None:
                q = q.filter(pl.col("tag") == tag)
            return q

        @staticmethod
        def _row(rec: Dict[str, Any]) -> Row:
            return Row(
                uuid=rec["uuid"],
                ledger_name=rec["ledger_name"],
                seq=int(rec["seq"]),
                block_height=int(rec["block_height"]),
                ts=rec["ts"],
                namespace=rec["namespace"],
                kind=rec["kind"],
                entity=rec["entity"],
                sender=rec["sender"],
                tag=rec["tag"] or "",
                payload_type=rec["payload_type"],
                payload=PayloadTypeRegistry.unwrap(rec["payload_type"], rec["payload"]),
                slotledger_version=rec["slotledger_version"],
            )

        def iter_rows(
            self,
            *,
            namespace: Optional[Any] = None,
            kind: Optional[str] = None,
            entity: Optional[str] = None,
            tag: Optional[str] = None,
        ) -> Iterator[Row]:
            q = self._filter(namespace=namespace, kind=kind, entity=entity, tag=tag)
            for rec in q.iter_rows(named=True):
                yield self._row(rec)

        def latest(
            self,
            *,
            namespace: Optional[Any] = None,
            kind: Optional[str] = None,
            entity: Optional[str] = None,
            tag: Optional[str] = None,
        ) -> Optional[Row]:
            q = self._filter(namespace=namespace, kind=kind, entity=entity, tag=tag)
            if q.height == 0:
                return None
            return self._row(q.tail(1).to_dicts()[0])

        def count(self, **filters: Any) -> int:
            return int(self._filter(**filters).height)

    def reader(self) -> LedgerReader:
        return PolarsJournal._Reader(self._materialize())

    @property
    def table(self) -> ibis.Table:
        """The journal as an ibis in-memory table, for `JournalReporter` queries."""
        return ibis.memtable(self._materialize().to_arrow())

    # ---- frame helpers (no I/O) ----
    def frame(self) -> pl.DataFrame:
        """Return a copy of the underlying Polars DataFrame."""
        return self._materialize().clone()

    def replace_with_frame(self, df: pl.DataFrame) -> None:
        """Replace the internal frame (schema will be normalized).

        A frame without a ``seq`` column is numbered in row order; other
        missing columns are filled with nulls.
        """
        if "seq" not in df.columns:
            df = df.with_columns(pl.int_range(pl.len(), dtype=pl.Int64).alias("seq"))
        for c, t in self._SCHEMA.items():
            if c not in df.columns:
                df = df.with_columns(pl.lit(None, dtype=cast(Any, t)).alias(c))
        self._df = df.select(JOURNAL_COLUMNS).cast(cast(Any, self._SCHEMA))
        self._pending = []
