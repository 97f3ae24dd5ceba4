"""Run the README example against a Google Sheet.

Usage:
    python run_readme_example.py <spreadsheet_id>
"""

import sys

import gspread

from sheetstore import (
    ColumnOrderBy,
    KVStore,
    KVStoreConfig,
    OrderBy,
    RowStore,
    RowStoreConfig,
    SheetsClient,
)


def _get_gspread_client():
    try:
        return gspread.service_account()
    except Exception:
        pass
    try:
        return gspread.oauth()
    except Exception as exc:
        print(f"Error: could not authenticate with Google Sheets: {exc}")
        print("See README for credential setup instructions.")
        sys.exit(1)


if len(sys.argv) != 2:
    print(__doc__)
    sys.exit(2)

spreadsheet_id = sys.argv[1]
client = SheetsClient(_get_gspread_client())

employees = RowStore.create(
    client,
    spreadsheet_id,
    "employees",
    RowStoreConfig(columns=["name", "age", "dept", "salary"]),
)
employees.insert(
    {"name": "Alice", "age": 30, "dept": "eng", "salary": 95000},
    {"name": "Bob", "age": 25, "dept": "eng", "salary": 85000},
    {"name": "Charlie", "age": 35, "dept": "sales", "salary": 72000},
).exec()

employees.update({"salary": 99000}).where("name = ?", "Alice").exec()
senior = (
    employees.select("name", "dept", "salary")
    .where("age > ?", 28)
    .order_by([ColumnOrderBy("salary", OrderBy.DESC)])
    .exec_dataframe()
)
print(senior)
print("eng headcount:", employees.count().where("dept = ?", "eng").exec())

settings = KVStore.create(client, spreadsheet_id, "settings", KVStoreConfig())
settings.set("theme", "dark")
print("theme:", settings.get("theme"))
