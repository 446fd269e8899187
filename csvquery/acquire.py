"""
Content acquisition.

Each source knows how to produce the raw bytes of one CSV snapshot:

- LocalFileSource: the configured dataset on disk
- RemoteURLSource: the configured dataset behind a fixed URL
- UploadedPartSource: a multipart file part already spooled by the server

Nothing is cached; every call to ``acquire()`` goes back to the source.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from starlette.datastructures import UploadFile

from .config import Settings
from .errors import ContentReadError, NetworkError, NotFound

logger = logging.getLogger(__name__)


class Provenance(str, enum.Enum):
    LOCAL_FILE = "local_file"
    REMOTE_URL = "remote_url"
    UPLOADED_PART = "uploaded_part"


@dataclass(frozen=True)
class RawContent:
    data: bytes
    provenance: Provenance
    origin: str

    def __len__(self) -> int:
        return len(self.data)


class LocalFileSource:
    def __init__(self, path: str):
        self.path = path

    def acquire(self) -> RawContent:
        try:
            with open(self.path, "rb") as f:
                data = f.read()
        except FileNotFoundError as e:
            raise NotFound(f"CSV file not found: {self.path}") from e
        except OSError as e:
            raise ContentReadError(f"Cannot read CSV file {self.path}: {e}") from e

        logger.info("acquired %d bytes from file %s", len(data), self.path)
        return RawContent(data=data, provenance=Provenance.LOCAL_FILE, origin=self.path)


class RemoteURLSource:
    """Single GET against a fixed URL. No retries."""

    def __init__(self, url: str, timeout: Optional[float] = None):
        self.url = url
        self.timeout = timeout

    def acquire(self) -> RawContent:
        try:
            resp = requests.get(self.url, timeout=self.timeout, stream=True)
        except requests.RequestException as e:
            raise NetworkError(f"GET {self.url} failed: {e}") from e

        with resp:
            if not resp.ok:
                raise NetworkError(f"GET {self.url} failed: {resp.status_code} {resp.reason}")
            try:
                data = resp.content
            except requests.RequestException as e:
                raise ContentReadError(f"Cannot read response body from {self.url}: {e}") from e

        logger.info("acquired %d bytes from %s", len(data), self.url)
        return RawContent(data=data, provenance=Provenance.REMOTE_URL, origin=self.url)


class UploadedPartSource:
    """
    Reads back a file part that the multipart parser spooled to a temporary file.

    The spool is closed once read, whatever happens, so the temporary file never
    outlives the request.
    """

    def __init__(self, part: UploadFile):
        self.part = part

    def acquire(self) -> RawContent:
        origin = self.part.filename or "<upload>"
        spool = self.part.file
        try:
            spool.seek(0)
            data = spool.read()
        except (OSError, ValueError) as e:
            raise ContentReadError(f"Cannot read uploaded part {origin}: {e}") from e
        finally:
            spool.close()

        logger.info("acquired %d bytes from upload %s", len(data), origin)
        return RawContent(data=data, provenance=Provenance.UPLOADED_PART, origin=origin)


def build_read_source(settings: Settings):
    """Source backing the ``read`` operation for this deployment."""
    if settings.read_source == "remote":
        return RemoteURLSource(settings.remote_url, timeout=settings.remote_timeout)
    return LocalFileSource(settings.csv_file_path)
