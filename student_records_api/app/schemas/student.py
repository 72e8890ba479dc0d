"""
Pydantic models for student records.

``StudentFields`` holds the five business fields that a client submits
and that PUT replaces as a unit.  ``StudentRead`` adds the
store-generated ``id`` and ``created_at`` for responses.  Request
bodies are accepted as plain JSON objects and passed through the
record validator, which checks presence in a fixed order before these
models coerce the values.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_AGE = 150


class StudentFields(BaseModel):
    """The five business fields of a student record.

    Ages are bounded to ``0..MAX_AGE`` and scores must be finite;
    ``NaN`` and ``Infinity`` are rejected.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    name: str = Field(..., examples=["Amy"])
    age: int = Field(..., ge=0, le=MAX_AGE, examples=[21])
    gender: str = Field(..., examples=["F"])
    midterm: float = Field(..., examples=[70.0])
    final: float = Field(..., examples=[80.0])

    @field_validator("name", "gender")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class StudentRead(StudentFields):
    """Schema for reading a stored student record."""

    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DeleteResult(BaseModel):
    success: bool = True


class HealthRead(BaseModel):
    """Body of ``GET /api/health``."""

    ok: bool
    mode: str = Field(..., examples=["demo"])
    database: str = Field(..., examples=["memory"])
    message: str
