"""Value objects exchanged between the hook and its callers."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HookEventKind(StrEnum):
    ISSUED = "issued"
    ACCEPTED = "accepted"
    FAILED = "failed"
    DISCARDED = "discarded"


class FetchMeta(BaseModel):
    """Metadata handed to the reducer together with an accepted result."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    args: tuple[Any, ...] = Field(default=(), description="Parameter snapshot of the invocation")
    invocation_id: int = Field(..., ge=1)


class HookResult(BaseModel):
    """What a hook exposes to the reactive layer after each evaluation."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    loading: bool
    state: Any = None
    error: BaseException | None = None


class HookEvent(BaseModel):
    """A trace record of a single sequencing decision."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    hook: str
    kind: HookEventKind
    invocation_id: int
    latest_issued_id: int | None = None
    args: tuple[Any, ...] = ()
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
