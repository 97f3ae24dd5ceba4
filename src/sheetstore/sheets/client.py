"""
Google Sheets API client wrapper.

This module provides a high-level interface to the Google Sheets API via gspread,
with error wrapping for the operations needed by the row store:
- Spreadsheet and sheet (tab) management
- Appending, updating, batch updating and clearing value ranges
- Running Google Visualization API Query Language queries against a sheet
"""

import json
import logging
from typing import Any, Dict, List, Optional

import gspread
from gspread.exceptions import APIError

from sheetstore.exceptions import SheetsAPIError, UnexpectedResultError
from sheetstore.sheets.model import (
    A1Range,
    AppendMode,
    BatchUpdateRowsRequest,
    InsertRowsResult,
    QueryRowsResult,
    UpdateRowsResult,
    MAJOR_DIMENSION_ROWS,
    QUERY_ROWS_URL_TEMPLATE,
    RESPONSE_VALUE_RENDER_FORMATTED,
    VALUE_INPUT_USER_ENTERED,
)

logger = logging.getLogger(__name__)

_RAW_VALUE_TYPES = ("boolean", "number", "string")
_FORMATTED_VALUE_TYPES = ("date", "datetime", "timeofday")


class SheetsClient:
    """
    A wrapper around gspread for Google Sheets API operations.

    This client wraps an authenticated gspread client, adding error handling
    and a spreadsheet-ID based interface for the operations used by the
    row store. Requests go through gspread's HTTP client, whose authorized
    session refreshes the access token before each call.

    Attributes:
        gc: The authenticated gspread client instance
    """

    def __init__(self, gc: gspread.Client) -> None:
        """
        Initialize the Sheets client with an authenticated gspread client.

        Args:
            gc: An authenticated gspread client, e.g. from ``gspread.service_account()``
                or ``gspread.oauth()``.
        """
        self.gc = gc

    @property
    def http(self) -> Any:
        return self.gc.http_client

    def create_spreadsheet(self, title: str) -> str:
        """
        Create a new spreadsheet.

        Args:
            title: The title for the new spreadsheet

        Returns:
            The ID of the created spreadsheet

        Raises:
            SheetsAPIError: If the API call fails
        """
        try:
            return self.gc.create(title).id
        except APIError as e:
            raise SheetsAPIError(f"Failed to create spreadsheet '{title}': {e}") from e

    def get_sheet_name_to_id(self, spreadsheet_id: str) -> Dict[str, int]:
        """
        Map every sheet (tab) title in a spreadsheet to its numeric sheet ID.

        Raises:
            SheetsAPIError: If the API call fails
            UnexpectedResultError: If the metadata has no sheet list
        """
        try:
            metadata = self.http.fetch_sheet_metadata(spreadsheet_id)
        except APIError as e:
            raise SheetsAPIError(
                f"Failed to fetch metadata of spreadsheet '{spreadsheet_id}': {e}"
            ) from e

        if "sheets" not in metadata:
            raise UnexpectedResultError(
                f"Spreadsheet '{spreadsheet_id}' metadata has no sheet information"
            )

        result: Dict[str, int] = {}
        for sheet in metadata["sheets"]:
            properties = sheet.get("properties")
            if not properties:
                raise UnexpectedResultError("Sheet metadata is missing its properties")
            result[properties["title"]] = properties["sheetId"]
        return result

    def create_sheet(self, spreadsheet_id: str, sheet_name: str) -> None:
        """
        Add a new sheet (tab) to an existing spreadsheet.

        Args:
            spreadsheet_id: The spreadsheet to add the sheet to
            sheet_name: The title for the new sheet

        Raises:
            SheetsAPIError: If the API call fails (including when the title is taken)
        """
        body = {"requests": [{"addSheet": {"properties": {"title": sheet_name}}}]}
        try:
            self.http.batch_update(spreadsheet_id, body)
        except APIError as e:
            raise SheetsAPIError(
                f"Failed to add sheet '{sheet_name}' to spreadsheet: {e}"
            ) from e
        logger.debug("Created sheet %r in spreadsheet %s", sheet_name, spreadsheet_id)

    def delete_sheets(self, spreadsheet_id: str, sheet_ids: List[int]) -> None:
        """
        Delete sheets (tabs) by their numeric IDs in a single batch request.

        Raises:
            SheetsAPIError: If the API call fails
        """
        if not sheet_ids:
            return

        body = {"requests": [{"deleteSheet": {"sheetId": sheet_id}} for sheet_id in sheet_ids]}
        try:
            self.http.batch_update(spreadsheet_id, body)
        except APIError as e:
            raise SheetsAPIError(f"Failed to delete {len(sheet_ids)} sheet(s): {e}") from e

    def insert_rows(
        self,
        spreadsheet_id: str,
        a1_range: str,
        values: List[List[Any]]
    ) -> InsertRowsResult:
        """
        Append rows after the table found in ``a1_range``, inserting new sheet rows.

        Raises:
            SheetsAPIError: If the API call fails
        """
        return self._append_rows(spreadsheet_id, a1_range, values, AppendMode.INSERT)

    def overwrite_rows(
        self,
        spreadsheet_id: str,
        a1_range: str,
        values: List[List[Any]]
    ) -> InsertRowsResult:
        """
        Append rows after the table found in ``a1_range``, writing into existing empty rows.

        Raises:
            SheetsAPIError: If the API call fails
        """
        return self._append_rows(spreadsheet_id, a1_range, values, AppendMode.OVERWRITE)

    def _append_rows(
        self,
        spreadsheet_id: str,
        a1_range: str,
        values: List[List[Any]],
        mode: AppendMode
    ) -> InsertRowsResult:
        params = {
            "insertDataOption": mode.value,
            "includeValuesInResponse": True,
            "responseValueRenderOption": RESPONSE_VALUE_RENDER_FORMATTED,
            "valueInputOption": VALUE_INPUT_USER_ENTERED,
        }
        body = {
            "majorDimension": MAJOR_DIMENSION_ROWS,
            "range": a1_range,
            "values": values,
        }
        try:
            response = self.http.values_append(spreadsheet_id, a1_range, params, body)
        except APIError as e:
            raise SheetsAPIError(
                f"Failed to append {len(values)} row(s) to range '{a1_range}': {e}"
            ) from e

        updates = response.get("updates")
        if not updates:
            raise UnexpectedResultError(
                f"Appending to range '{a1_range}' returned no updates"
            )

        logger.debug("Appended %d row(s) to %s", len(values), a1_range)
        return InsertRowsResult(
            updated_range=A1Range(updates.get("updatedRange", "")),
            updated_rows=updates.get("updatedRows", 0),
            updated_columns=updates.get("updatedColumns", 0),
            updated_cells=updates.get("updatedCells", 0),
            inserted_values=updates.get("updatedData", {}).get("values", []),
        )

    def update_rows(
        self,
        spreadsheet_id: str,
        a1_range: str,
        values: List[List[Any]]
    ) -> UpdateRowsResult:
        """
        Write values to a range in a spreadsheet.

        Args:
            spreadsheet_id: The spreadsheet to write to
            a1_range: Sheet-qualified A1 notation range (e.g., "Sheet1!A1:C10")
            values: A 2D list of values to write

        Returns:
            Summary of the written range

        Raises:
            SheetsAPIError: If the API call fails
        """
        params = {
            "includeValuesInResponse": True,
            "responseValueRenderOption": RESPONSE_VALUE_RENDER_FORMATTED,
            "valueInputOption": VALUE_INPUT_USER_ENTERED,
        }
        body = {
            "majorDimension": MAJOR_DIMENSION_ROWS,
            "range": a1_range,
            "values": values,
        }
        try:
            response = self.http.values_update(spreadsheet_id, a1_range, params=params, body=body)
        except APIError as e:
            raise SheetsAPIError(
                f"Failed to write values to range '{a1_range}': {e}"
            ) from e
        return _to_update_rows_result(response)

    def batch_update_rows(
        self,
        spreadsheet_id: str,
        requests: List[BatchUpdateRowsRequest]
    ) -> List[UpdateRowsResult]:
        """
        Batch update multiple value ranges in one API call.

        Args:
            spreadsheet_id: The spreadsheet to write to
            requests: Ranges and the values to write into each of them

        Returns:
            One summary per updated range

        Raises:
            SheetsAPIError: If the API call fails
        """
        if not requests:
            return []

        body = {
            "data": [
                {
                    "majorDimension": MAJOR_DIMENSION_ROWS,
                    "range": req.a1_range,
                    "values": req.values,
                }
                for req in requests
            ],
            "includeValuesInResponse": True,
            "responseValueRenderOption": RESPONSE_VALUE_RENDER_FORMATTED,
            "valueInputOption": VALUE_INPUT_USER_ENTERED,
        }
        try:
            response = self.http.values_batch_update(spreadsheet_id, body=body)
        except APIError as e:
            raise SheetsAPIError(
                f"Failed to batch update {len(requests)} value ranges: {e}"
            ) from e

        logger.debug("Batch updated %d range(s) in %s", len(requests), spreadsheet_id)
        return [_to_update_rows_result(resp) for resp in response.get("responses", [])]

    def query_rows(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        query: str,
        skip_header: bool
    ) -> QueryRowsResult:
        """
        Run a Google Visualization API Query Language query against a sheet.

        Args:
            spreadsheet_id: The spreadsheet to query
            sheet_name: The sheet (tab) the query runs against
            query: Query string, e.g. ``select B, C where A is not null``
            skip_header: Treat the first row as a header rather than data

        Returns:
            Typed rows; date, datetime and time-of-day cells are returned
            using their formatted text

        Raises:
            SheetsAPIError: If the HTTP request fails
            UnexpectedResultError: If the response cannot be decoded or reports an error
        """
        url = QUERY_ROWS_URL_TEMPLATE.format(spreadsheet_id)
        params = {
            "sheet": sheet_name,
            "tqx": "responseHandler:freedb",
            "tq": query,
            "headers": "1" if skip_header else "0",
        }
        logger.debug("Querying sheet %r: %s", sheet_name, query)
        try:
            response = self.http.request("get", url, params=params)
        except APIError as e:
            raise SheetsAPIError(f"Failed to query rows with '{query}': {e}") from e

        return _to_query_rows_result(_extract_json_payload(response.text))

    def clear(self, spreadsheet_id: str, ranges: List[str]) -> List[str]:
        """
        Clear the values of several ranges in one API call.

        Returns:
            The ranges reported as cleared by the API

        Raises:
            SheetsAPIError: If the API call fails
        """
        try:
            response = self.http.values_batch_clear(spreadsheet_id, body={"ranges": ranges})
        except APIError as e:
            raise SheetsAPIError(f"Failed to clear {len(ranges)} range(s): {e}") from e

        logger.debug("Cleared %d range(s) in %s", len(ranges), spreadsheet_id)
        return response.get("clearedRanges", [])


def _to_update_rows_result(response: Dict[str, Any]) -> UpdateRowsResult:
    return UpdateRowsResult(
        updated_range=A1Range(response.get("updatedRange", "")),
        updated_rows=response.get("updatedRows", 0),
        updated_columns=response.get("updatedColumns", 0),
        updated_cells=response.get("updatedCells", 0),
        updated_values=response.get("updatedData", {}).get("values", []),
    )


def _extract_json_payload(text: str) -> Dict[str, Any]:
    """Cut the JSON object out of the JavaScript callback the endpoint responds with."""
    first = text.find("{")
    if first == -1:
        raise UnexpectedResultError(f"Opening curly bracket not found: {text}")

    last = text.rfind("}")
    if last == -1:
        raise UnexpectedResultError(f"Closing curly bracket not found: {text}")

    try:
        return json.loads(text[first:last + 1])
    except ValueError as e:
        raise UnexpectedResultError(f"Failed to parse query response: {e}") from e


def _to_query_rows_result(payload: Dict[str, Any]) -> QueryRowsResult:
    if payload.get("status") == "error":
        raise UnexpectedResultError(f"Query failed: {payload.get('errors', [])}")

    table = payload.get("table")
    if not table or not table.get("rows"):
        return QueryRowsResult()

    cols = table.get("cols", [])
    rows = []
    for raw_row in table["rows"]:
        cells = raw_row.get("c") or []
        rows.append([
            _convert_raw_value(cols[idx]["type"], cell) for idx, cell in enumerate(cells)
        ])
    return QueryRowsResult(rows=rows)


def _convert_raw_value(col_type: str, cell: Optional[Dict[str, Any]]) -> Any:
    if cell is None:
        return None

    if col_type in _RAW_VALUE_TYPES:
        return cell.get("v")
    if col_type in _FORMATTED_VALUE_TYPES:
        return cell.get("f")
    raise UnexpectedResultError(f"Unsupported cell value type: {col_type}")
