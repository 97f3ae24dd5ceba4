"""
Row store and key-value store module.

This module lets a Google Sheet be used as a table queried with SQL-like
Select/Insert/Update/Delete/Count statements, or as a key-value store.
"""

from sheetstore.store.kv import KVMode, KVStore, KVStoreConfig
from sheetstore.store.models import ColumnOrderBy, OrderBy
from sheetstore.store.query import QueryBuilder
from sheetstore.store.row import RowStore, RowStoreConfig
from sheetstore.store.statements import (
    CountStmt,
    DeleteStmt,
    InsertStmt,
    SelectStmt,
    UpdateStmt,
)

__all__ = [
    "KVMode",
    "KVStore",
    "KVStoreConfig",
    "ColumnOrderBy",
    "OrderBy",
    "QueryBuilder",
    "RowStore",
    "RowStoreConfig",
    "SelectStmt",
    "InsertStmt",
    "UpdateStmt",
    "DeleteStmt",
    "CountStmt",
]
