"""
Operation dispatch: binds ``read`` and ``uploadCSV`` to acquire -> decode -> normalize.

Both operations are single-shot and stateless. ``uploadCSV`` echoes the
normalized upload back to the caller; it does not replace the dataset that
``read`` serves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from starlette.datastructures import UploadFile

from .acquire import UploadedPartSource, build_read_source
from .config import Settings
from .decode import decode, decode_text
from .errors import InvalidArgument
from .normalize import normalize
from .rules import READ_OPERATION, UPLOAD_OPERATION

logger = logging.getLogger(__name__)


@dataclass
class OperationRequest:
    operation_name: str
    argument: Optional[Any] = None


class OperationDispatcher:
    def __init__(self, settings: Settings):
        self.settings = settings

    def read(self) -> str:
        source = build_read_source(self.settings)
        table = decode(source.acquire())
        logger.info("read: %d rows", len(table))
        return normalize(table)

    def upload_csv(self, argument: Any) -> str:
        if self.settings.upload_mode == "multipart":
            if not isinstance(argument, UploadFile):
                raise InvalidArgument(
                    f"uploadCSV expects a file part, got {type(argument).__name__}"
                )
            table = decode(UploadedPartSource(argument).acquire())
        else:
            if not isinstance(argument, str):
                raise InvalidArgument(
                    f"file content must be a string, got {type(argument).__name__}"
                )
            table = decode_text(argument)

        logger.info("uploadCSV: %d rows (not persisted)", len(table))
        return normalize(table)

    def dispatch(self, request: OperationRequest) -> str:
        if request.operation_name == READ_OPERATION:
            if request.argument is not None:
                raise InvalidArgument("read takes no arguments")
            return self.read()
        if request.operation_name == UPLOAD_OPERATION:
            return self.upload_csv(request.argument)
        raise InvalidArgument(f"Unknown operation: {request.operation_name!r}")
