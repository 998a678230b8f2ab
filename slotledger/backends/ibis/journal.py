"""
slotledger.backends.ibis.journal
================================

ibis-framework based journal.

- Backend-agnostic via ibis-framework (duckdb in memory by default)
- JSON payload text with type-based wrap/unwrap
- Automatic ledger_name and slotledger_version tracking
- Several journals may share one table, separated by ``ledger_name``

Examples
--------
>>> from slotledger.backends.ibis.journal import IbisJournal, create_test_connection
>>> from slotledger.core.names import Namespace
>>>
>>> conn = create_test_connection("duckdb")
>>> journal = IbisJournal(conn)
>>> journal.record_initialized(entity="ST1.accumulator", sender="ST1", block_height=1)
>>>
>>> # Query data (raw rows)
>>> query = journal.table.filter(journal.table.namespace == "gate")
>>> len(query.execute())
1
"""

from __future__ import annotations
import uuid as uuid_module
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

import ibis
import pandas as pd
from ibis import BaseBackend
from ibis.expr.types import Table

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


def get_journal_schema() -> ibis.Schema:
    """Get the standardized journal schema using ibis.Schema."""
    return ibis.schema(
        [
            ("uuid", "string"),
            ("ledger_name", "string"),
            ("seq", "int64"),
            ("block_height", "int64"),
            ("ts", "timestamp"),  # naive, UTC
            ("namespace", "string"),
            ("kind", "string"),
            ("entity", "string"),
            ("sender", "string"),
            ("tag", "string"),
            ("payload_type", "string"),
            ("payload", "string"),  # JSON text; u128 values exceed int64
            ("slotledger_version", "string"),
        ]
    )


class IbisJournal(JournalOps):
    """
    Journal stored in a table of any ibis backend.

    Responsibilities:
    - Database connection management
    - Schema guarantee and table lifecycle
    - Automatic ledger_name and slotledger_version injection
    - Payload wrapping/unwrapping via PayloadTypeRegistry

    Aggregations beyond the `LedgerReader` filters are left to callers,
    who build ibis expressions on `table`.
    """

    def __init__(
        self,
        connection: BaseBackend,
        ledger_name: str = "default",
        table_name: str = "journal",
    ):
        """Initialize journal with connection and names.

        Parameters
        ----------
        connection : BaseBackend
            Ibis backend connection
        ledger_name : str
            Name of this journal instance (for multi-journal tables)
        table_name : str
            Name of the table in the backend
        """
        self.connection = connection
        self.ledger_name = ledger_name
        self.table_name = table_name
        self._ensure_table_exists()
        self._seq = int(self.raw_table.count().execute())

    def _ensure_table_exists(self) -> None:
        """Create table with standardized schema if it doesn't exist."""
        if self.table_name not in self.connection.list_tables():
            self.connection.create_table(self.table_name, schema=get_journal_schema())

    @property
    def table(self) -> Table:
        """
        Get ibis table filtered by journal name.

        This is the main interface for querying; callers use it to build ibis
        expressions for filtering, aggregation, etc.
        """
        table = self.connection.table(self.table_name)
        return table.filter(table.ledger_name == self.ledger_name)

    @property
    def raw_table(self) -> Table:
        """Unfiltered table, shared by every journal name."""
        return self.connection.table(self.table_name)

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
    ) -> "IbisJournal":
        if ts.tzinfo is not None:
            ts = ts.astimezone(timezone.utc).replace(tzinfo=None)

        record = {
            "uuid": str(uuid_module.uuid4()),
            "ledger_name": self.ledger_name,
            "seq": self._seq,
            "block_height": int(block_height),
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
        self.connection.insert(
            self.table_name, pd.DataFrame([record], columns=JOURNAL_COLUMNS)
        )
        self._seq += 1
        return self

    class _Reader(LedgerReader):
        def __init__(self, table: Table) -> None:
            self.t = table

        def _filter(
            self,
            *,
            namespace: Optional[Any] = None,
            kind: Optional[str] = None,
            entity: Optional[str] = None,
            tag: Optional[str] = None,
        ) -> Table:
            q = self.t
            if namespace is not None:
                q = q.filter(q.namespace == namespace_str(namespace))
            if kind is not None:
                q = q.filter(q.kind == kind)
            if entity is not None:
                q = q.filter(q.entity == entity)
            if tag is not None:
                q = q.filter(q.tag == tag)
            return q

        @staticmethod
        def _rows(df: pd.DataFrame) -> List[Row]:
            records: List[Dict[str, Any]] = df.to_dict("records")
            return [
                Row(
                    uuid=rec["uuid"],
                    ledger_name=rec["ledger_name"],
                    seq=int(rec["seq"]),
                    block_height=int(rec["block_height"]),
                    ts=pd.Timestamp(rec["ts"]).to_pydatetime().replace(tzinfo=timezone.utc),
                    namespace=rec["namespace"],
                    kind=rec["kind"],
                    entity=rec["entity"],
                    sender=rec["sender"],
                    tag=rec["tag"] or "",
                    payload_type=rec["payload_type"],
                    payload=PayloadTypeRegistry.unwrap(rec["payload_type"], rec["payload"]),
                    slotledger_version=rec["slotledger_version"],
                )
                for rec in records
            ]

        def iter_rows(
            self,
            *,
            namespace: Optional[Any] = None,
            kind: Optional[str] = None,
            entity: Optional[str] = None,
            tag: Optional[str] = None,
        ) -> Iterator[Row]:
            q = self._filter(namespace=namespace, kind=kind, entity=entity, tag=tag)
            yield from self._rows(q.order_by("seq").execute())

        def latest(
            self,
            *,
            namespace: Optional[Any] = None,
            kind: Optional[str] = None,
            entity: Optional[str] = None,
            tag: Optional[str] = None,
        ) -> Optional[Row]:
            q = self._filter(namespace=namespace, kind=kind, entity=entity, tag=tag)
            rows = self._rows(q.order_by(ibis.desc("seq")).limit(1).execute())
            return rows[0] if rows else None

        def count(self, **filters: Any) -> int:
            return int(self._filter(**filters).count().execute())

    def reader(self) -> LedgerReader:
        return IbisJournal._Reader(self.table)


def create_test_connection(backend: str = "duckdb") -> BaseBackend:
    """Create an in-memory connection for tests and examples.

    Parameters
    ----------
    backend : str
        Backend type; only "duckdb" supports the inserts the journal needs.
    """
    if backend == "duckdb":
        return ibis.duckdb.connect(":memory:")
    raise ValueError(f"Unsupported backend: {backend}. Use 'duckdb'.")
