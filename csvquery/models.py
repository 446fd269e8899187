from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import AliasChoices, BaseModel, Field


class OperationError(BaseModel):
    message: str
    kind: str = Field(examples=["MalformedCSV"])


class OperationResponse(BaseModel):
    data: Optional[Dict[str, str]] = Field(
        default=None, examples=[{"read": "name$age$city\nJohn$30$New York"}]
    )
    errors: List[OperationError] = Field(default_factory=list)


class UploadRequest(BaseModel):
    # Left untyped: the dispatcher owns argument shape validation.
    file_content: Any = Field(
        default=None,
        validation_alias=AliasChoices("fileContent", "file"),
    )


class HealthResponse(BaseModel):
    ok: bool = True
