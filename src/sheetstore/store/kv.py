"""
Key-value store on top of a two-column row store.

Two modes are supported:
- DEFAULT: one row per key. ``set`` deletes the existing row and inserts a
  new one, so the key is briefly absent between the two calls.
- APPEND_ONLY: every ``set`` and ``delete`` inserts a new row, keeping the
  history. The row with the highest row index wins; an empty value is a
  tombstone left by ``delete``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from sheetstore.codec import BasicCodec, Codec
from sheetstore.exceptions import KeyNotFoundError
from sheetstore.sheets.client import SheetsClient
from sheetstore.store.models import ROW_IDX_COL, ColumnOrderBy, OrderBy
from sheetstore.store.row import RowStore, RowStoreConfig


KEY_COL = "key"
VALUE_COL = "value"


class KVMode(Enum):
    """Consistency and history mode of a :class:`KVStore`."""
    DEFAULT = 0
    APPEND_ONLY = 1


@dataclass
class KVStoreConfig:
    mode: KVMode = KVMode.DEFAULT


class KVStore:
    """A Google Sheet used as a key-value store.

    Usage::

        store = KVStore.create(client, spreadsheet_id, "kv", KVStoreConfig())
        store.set("k1", "v1")
        store.get("k1")  # "v1"
        store.delete("k1")

    Attributes:
        row_store: The underlying ``key``/``value`` row store
        mode: DEFAULT or APPEND_ONLY
        codec: Codec applied to values before they are stored
    """

    def __init__(self, row_store: RowStore, mode: KVMode, codec: Codec) -> None:
        self.row_store = row_store
        self.mode = mode
        self.codec = codec

    @classmethod
    def create(
        cls,
        client: SheetsClient,
        spreadsheet_id: str,
        sheet_name: str,
        config: KVStoreConfig
    ) -> "KVStore":
        """Create a key-value store, creating the sheet if needed.

        Raises:
            SheetsAPIError: If an API call fails
        """
        row_config = RowStoreConfig(columns=[KEY_COL, VALUE_COL])
        row_store = RowStore.create(client, spreadsheet_id, sheet_name, row_config)
        return cls(row_store, config.mode, BasicCodec())

    def get(self, key: str) -> str:
        """Return the decoded value stored under ``key``.

        Raises:
            KeyNotFoundError: If the key was never set or has been deleted
            SheetsAPIError: If the query fails
        """
        stmt = self.row_store.select(VALUE_COL).where(f"{KEY_COL} = ?", key)
        if self.mode == KVMode.APPEND_ONLY:
            stmt = stmt.order_by([ColumnOrderBy(ROW_IDX_COL, OrderBy.DESC)])
        rows: List[Dict[str, Any]] = stmt.limit(1).exec()

        if not rows:
            raise KeyNotFoundError(key)

        value = rows[0].get(VALUE_COL)
        if value is None or value == "":
            raise KeyNotFoundError(key)
        return self.codec.decode(value)

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        encoded = self.codec.encode(value)

        if self.mode == KVMode.DEFAULT:
            self.row_store.delete().where(f"{KEY_COL} = ?", key).exec()
        self.row_store.insert({KEY_COL: key, VALUE_COL: encoded}).exec()

    def delete(self, key: str) -> None:
        """Remove ``key``; deleting a missing key is not an error."""
        if self.mode == KVMode.DEFAULT:
            self.row_store.delete().where(f"{KEY_COL} = ?", key).exec()
        else:
            self.row_store.insert({KEY_COL: key, VALUE_COL: ""}).exec()
