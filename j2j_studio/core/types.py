"""Core data types for J2J Studio.

Wire models mirror the transform service's JSON field names through
aliases, so ``model_dump(by_alias=True)`` produces request bodies and
``model_validate`` accepts response bodies directly.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class BufferKind(str, Enum):
    """The three documents a studio session holds."""

    INPUT = "input"
    SPEC = "spec"
    OUTPUT = "output"


class StatusLevel(str, Enum):
    """Severity of a buffer status line."""

    VALID = "valid"
    WARNING = "warning"
    ERROR = "error"
    PENDING = "pending"


class Complexity(str, Enum):
    """Complexity rating reported by the transform service."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    UNKNOWN = "Unknown"

    @classmethod
    def classify(cls, value: Any) -> "Complexity":
        """Map a raw service value onto a rating, defaulting to UNKNOWN."""
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return cls.UNKNOWN


class BufferStatus(BaseModel):
    """Status line shown next to a buffer."""

    label: str = Field(..., description="Short status text (Ready, Valid, Error...)")
    level: StatusLevel = Field(..., description="Severity used for styling")
    detail: str | None = Field(default=None, description="Longer explanation, if any")

    @classmethod
    def ready(cls) -> "BufferStatus":
        return cls(label="Ready", level=StatusLevel.VALID)

    @classmethod
    def required(cls) -> "BufferStatus":
        return cls(label="Required", level=StatusLevel.WARNING)

    @classmethod
    def validating(cls) -> "BufferStatus":
        return cls(label="Validating...", level=StatusLevel.PENDING)

    @classmethod
    def error(cls, label: str, detail: str | None = None) -> "BufferStatus":
        return cls(label=label, level=StatusLevel.ERROR, detail=detail)


class ValidationResult(BaseModel):
    """Answer from one of the two validation endpoints."""

    model_config = ConfigDict(extra="ignore")

    valid: bool = Field(..., description="Whether the buffer is acceptable")
    message: str = Field(default="", description="Short verdict from the service")
    details: str | None = Field(default=None, description="Longer explanation")
    level: str | None = Field(default=None, description="VALID, WARNING or ERROR")
    line: int | None = Field(default=None, description="1-based error line, if reported")
    column: int | None = Field(default=None, description="1-based error column, if reported")

    @property
    def detail_text(self) -> str:
        """Text to show under the status line.

        The headline message is kept in front of the details when both exist.
        """
        if self.message and self.details and self.details != self.message:
            return f"{self.message}: {self.details}"
        return self.details or self.message


class TransformRequest(BaseModel):
    """Body of ``POST /api/transform``.

    Exactly one of ``chain_spec`` and ``spec`` is populated.
    """

    model_config = ConfigDict(populate_by_name=True)

    operation: str = "chain"
    chain_spec: Any = Field(default=None, alias="chainSpec")
    spec: str | None = None
    input: str

    @model_validator(mode="after")
    def _exactly_one_spec(self) -> "TransformRequest":
        if self.has_chain_spec == (self.spec is not None):
            raise ValueError("exactly one of chainSpec and spec must be set")
        return self

    def to_body(self) -> dict[str, Any]:
        """Wire body with absent fields omitted."""
        body: dict[str, Any] = {"operation": self.operation}
        if "chain_spec" in self.model_fields_set:
            body["chainSpec"] = self.chain_spec
        if self.spec is not None:
            body["spec"] = self.spec
        body["input"] = self.input
        return body

    @property
    def has_chain_spec(self) -> bool:
        return "chain_spec" in self.model_fields_set


class TransformOutcome(BaseModel):
    """Answer from ``POST /api/transform``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    success: bool
    result: str | None = None
    execution_time_ms: int | None = Field(default=None, alias="executionTime")
    complexity: Complexity | None = None
    memory_usage: int | None = Field(default=None, alias="memoryUsage")
    error: str | None = None

    @field_validator("complexity", mode="before")
    @classmethod
    def _classify_complexity(cls, value: Any) -> Complexity | None:
        if value is None:
            return None
        return Complexity.classify(value)

    @field_validator("execution_time_ms", mode="before")
    @classmethod
    def _coerce_execution_time(cls, value: Any) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return int(value)
        return None
