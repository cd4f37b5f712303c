from __future__ import annotations

from pydantic import BaseModel, Field


class StructuralValidationResult(BaseModel):
    is_valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    info: list[str] = Field(default_factory=list)


class GenerationSmokeTest(BaseModel):
    passed: bool
    results: list[str] = Field(default_factory=list)
