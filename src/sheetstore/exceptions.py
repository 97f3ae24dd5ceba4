"""
Exception classes for sheetstore.

These exceptions are used throughout the sheetstore package to signal error conditions
while configuring a store, building queries, and talking to Google Sheets.
"""


class ConfigurationError(Exception):
    """Raised when a store or statement is configured incorrectly.

    Raised before any network call is made. Examples:
        - A row store with no columns, too many columns, or duplicate column names
        - An update statement with an empty column-to-value payload
        - An update statement targeting a column that is not configured
    """
    pass


class QueryBindingError(Exception):
    """Raised when where-clause arguments cannot be bound to the query.

    Examples:
        - The number of ``?`` placeholders differs from the number of arguments
        - An argument type that has no literal form in the query language
    """
    pass


class UnsafeIntegerError(Exception):
    """Raised when a number cannot travel through the API without precision loss.

    Google Sheets stores numbers as IEEE 754 doubles, so integers outside
    ``[-(2**53 - 1), 2**53 - 1]`` would be silently rounded.
    """

    def __init__(self, value: object = None) -> None:
        message = (
            "Integer provided is not within the IEEE 754 safe integer boundary of "
            "[-(2^53 - 1), 2^53 - 1], the integer may have a precision loss"
        )
        if value is not None:
            message = f"{message}: {value!r}"
        super().__init__(message)
        self.value = value


class UnexpectedResultError(Exception):
    """Raised when Google Sheets returns a result with an unexpected shape.

    Examples:
        - A row index lookup returning more than one column, or a non-numeric index
        - A count query returning more than one cell
        - A visualization query response that is not valid JSON
        - A query column type that cannot be decoded
    """
    pass


class SheetsAPIError(Exception):
    """Raised when Google Sheets API call fails.

    This error wraps exceptions from the Google Sheets API (via gspread) and provides
    context about which operation failed. Common causes include:
        - Authentication failures
        - Rate limiting (HTTP 429)
        - Network connectivity issues
        - Invalid spreadsheet IDs or permissions errors
        - Invalid queries sent to the visualization endpoint
    """
    pass


class KeyNotFoundError(Exception):
    """Raised by the key-value store when a key is absent or was deleted."""

    def __init__(self, key: str = "") -> None:
        super().__init__(f"key not found: {key!r}" if key else "key not found")
        self.key = key
