from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Table(BaseModel):
    """Normalized, display-ready table. Rows may be shorter than headers."""

    model_config = ConfigDict(frozen=True)

    headers: List[str] = Field(default_factory=list)
    rows: List[List[str]] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "Table":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.headers and not self.rows


class LocalSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["local"] = "local"
    path: Path


class CloudSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["cloud"] = "cloud"
    url: str
    sheet_name: str = Field(default="", examples=["Results"])


SourceDescriptor = Annotated[Union[LocalSource, CloudSource], Field(discriminator="kind")]


class SourceRequest(BaseModel):
    source: SourceDescriptor


class TableResponse(BaseModel):
    headers: List[str] = Field(default_factory=list)
    rows: List[List[str]] = Field(default_factory=list)
    result_column: Optional[int] = Field(default=None, examples=[3])
    source: Optional[SourceDescriptor] = None
    updated_at: Optional[datetime] = None
    loaded: bool = False


class SourceResponse(BaseModel):
    source: Optional[SourceDescriptor] = None


class HealthResponse(BaseModel):
    ok: bool = True
