"""
slotledger.backends.polars.io
=============================

Files for the Polars-backed journal.

A sink takes the materialized journal frame and writes it somewhere; a source
reads a frame back. `save_journal` and `load_journal` connect a
`PolarsJournal` to either. Parquet keeps the column types; CSV is an export
format for spreadsheets and is write-only here.

Examples
--------
>>> from slotledger.backends.polars.ledger import PolarsJournal
>>> from slotledger.backends.polars.io import ParquetSink, ParquetSource
>>> J = PolarsJournal(ledger_name="accumulator")
>>> J.record_initialized(entity="ST1.acc", sender="ST1", block_height=1)
>>> save_journal(J, ParquetSink("_tmp.parquet"))  # doctest: +SKIP
1
>>> load_journal(ParquetSource("_tmp.parquet")).ledger_name  # doctest: +SKIP
'accumulator'
"""

from __future__ import annotations
import logging
import os
from typing import Optional, Protocol

import polars as pl

from slotledger.backends.polars.ledger import PolarsJournal

logger = logging.getLogger(__name__)


class JournalSink(Protocol):
    def write(self, df: pl.DataFrame) -> None: ...


class JournalSource(Protocol):
    def read(self) -> pl.DataFrame: ...


class ParquetSink:
    """Write the journal to ``path``, or to ``path/filename`` when a filename is given.

    The directory form creates ``path`` on demand.
    """

    def __init__(self, path: str, filename: Optional[str] = None) -> None:
        self.path = path
        self.filename = filename

    @property
    def target(self) -> str:
        if self.filename is None:
            return self.path
        return os.path.join(self.path, self.filename)

    def write(self, df: pl.DataFrame) -> None:
        if self.filename is not None:
            os.makedirs(self.path, exist_ok=True)
        df.write_parquet(self.target)


class CsvSink:
    """Flat CSV export; payloads stay JSON text."""

    def __init__(self, path: str) -> None:
        self.path = path

    def write(self, df: pl.DataFrame) -> None:
        df.write_csv(self.path)


class ParquetSource:
    def __init__(self, path: str) -> None:
        self.path = path

    def read(self) -> pl.DataFrame:
        return pl.read_parquet(self.path)


def save_journal(journal: PolarsJournal, sink: JournalSink) -> int:
    """Write every row of ``journal`` to ``sink`` and return the row count."""
    df = journal.frame()
    sink.write(df)
    logger.info("journal %r: wrote %d rows", journal.ledger_name, df.height)
    return df.height


def load_journal(source: JournalSource, ledger_name: Optional[str] = None) -> PolarsJournal:
    """Read a journal back.

    Without ``ledger_name`` the name stored in the first row is used, falling
    back to ``"default"`` for an empty or unnamed frame.
    """
    df = source.read()
    if ledger_name is None:
        stored = df["ledger_name"].drop_nulls() if "ledger_name" in df.columns else None
        ledger_name = str(stored[0]) if stored is not None and len(stored) else "default"
    logger.info("journal %r: loaded %d rows", ledger_name, df.height)
    return PolarsJournal(df, ledger_name=ledger_name)
