from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Component(BaseModel):
    reference: str = ""  # U1, R1, C1 ...
    name: str = ""
    value: str | None = None
    footprint: str | None = None
    x: float | None = None
    y: float | None = None

    @field_validator("value", "footprint", mode="before")
    @classmethod
    def _numbers_as_text(cls, v):
        # LLM output often sends "value": 100 for a 100Ω part
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None


class Connection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_ref: str = Field(default="", alias="from")
    to_ref: str = Field(default="", alias="to")
    signal: str = ""


class PowerSpecs(BaseModel):
    voltage: str | float | None = None
    current_active: str | float | None = None  # mA
    current_sleep: str | float | None = None  # mA


class DesignSnapshot(BaseModel):
    components: list[Component] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)
    power_specs: PowerSpecs | None = None
