"""
Deterministic output rules.

This file exists to make the wire format explicit and enforceable.
Consumers split the normalized text on ROW_DELIMITER then FIELD_DELIMITER,
so none of these values may change without breaking them.
"""

INPUT_DELIMITER = ","

FIELD_DELIMITER = "$"
ROW_DELIMITER = "\n"
EMPTY_FIELD_PLACEHOLDER = " "

READ_OPERATION = "read"
UPLOAD_OPERATION = "uploadCSV"

INLINE_ARGUMENT = "fileContent"
INLINE_ARGUMENT_ALIAS = "file"
MULTIPART_FIELD = "file"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS, PUT, DELETE",
    "Access-Control-Allow-Headers": (
        "Content-Type, Access-Control-Allow-Headers, Authorization, X-Requested-With"
    ),
}
