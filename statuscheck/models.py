from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CheckState(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    target: str = Field(..., frozen=True)
    status: Optional[int] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _status_or_error(self) -> "CheckState":
        if self.status is not None and self.error is not None:
            raise ValueError("a check records either a status or an error, not both")
        return self

    @property
    def done(self) -> bool:
        return self.status is not None or self.error is not None


@dataclass(frozen=True)
class StatusMsg:
    status: int


@dataclass(frozen=True)
class ErrMsg:
    error: str

    def __str__(self) -> str:
        return self.error


@dataclass(frozen=True)
class KeyMsg:
    key: str

    def __str__(self) -> str:
        return self.key


Msg = StatusMsg | ErrMsg | KeyMsg
