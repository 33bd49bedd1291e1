from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ModelCapabilities(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    supports_function_calling: bool = False
    supports_vision: bool = False
    supports_streaming: bool = False
    supports_structured_output: bool = False


class ModelPricing(BaseModel):
    """Per-million-token costs. ``None`` or ``0`` means not applicable, never free."""
    model_config = ConfigDict(frozen=True, extra="allow")

    input_tokens_cost_per_million: Optional[float] = None
    output_tokens_cost_per_million: Optional[float] = None
    currency: Optional[str] = None


class Model(BaseModel):
    """A model record as listed by the upstream gateway.

    ``id`` is the only value usable as an API parameter; ``display_name`` is a
    label and may repeat across records.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    # relayed as-is, never displayed
    object: Any = None
    type: Any = None
    created: Any = None
    created_at: Any = None
    owned_by: str = ""
    display_name: str = ""
    capabilities: ModelCapabilities = Field(default_factory=ModelCapabilities)
    pricing: Optional[ModelPricing] = None
    # None / 0 mean "unknown", not zero capacity
    context_length: Optional[int] = None
    max_output_tokens: Optional[int] = None


class ModelListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    data: List[dict[str, Any]]
    total: int
    last_updated: str = Field(alias="lastUpdated", description="ISO-8601 timestamp of the fetch")


class ModelListError(BaseModel):
    success: bool = False
    error: str
    data: List[dict[str, Any]] = Field(default_factory=list)
    total: int = 0


class ModelListResult(BaseModel):
    """Normalized outcome of one upstream fetch.

    Either ``success`` with the raw records, or a failure carrying a
    human-readable ``error`` and an empty list. Never both.
    """

    success: bool
    data: List[dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    last_updated: Optional[datetime] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: List[dict[str, Any]], fetched_at: datetime) -> "ModelListResult":
        return cls(success=True, data=data, total=len(data), last_updated=fetched_at)

    @classmethod
    def failure(cls, message: str) -> "ModelListResult":
        return cls(success=False, error=message)

    def to_body(self) -> ModelListResponse | ModelListError:
        if self.success:
            if self.last_updated is None:
                raise ValueError("successful ModelListResult is missing last_updated")
            return ModelListResponse(
                data=self.data,
                total=self.total,
                last_updated=self.last_updated.isoformat(),
            )
        return ModelListError(error=self.error or "An error occurred")
