from __future__ import annotations


class DatasetError(Exception):
    """Base class for every failure the pipeline reports to its caller."""

    kind = "DatasetError"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def as_dict(self) -> dict:
        return {"message": self.message, "kind": self.kind}


class NotFound(DatasetError):
    kind = "NotFound"
    status_code = 404


class NetworkError(DatasetError):
    kind = "NetworkError"
    status_code = 502


class BadRequest(DatasetError):
    kind = "BadRequest"
    status_code = 400


class InvalidArgument(DatasetError):
    kind = "InvalidArgument"
    status_code = 422


class MalformedCSV(DatasetError):
    kind = "MalformedCSV"
    status_code = 422

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message)
        self.line = line


class ContentReadError(DatasetError):
    """Read failure not covered by a more specific kind."""

    kind = "IOError"
    status_code = 500
