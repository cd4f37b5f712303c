from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ComponentCategory = Literal[
    "microcontroller", "lora", "gps", "power", "connector", "passive"
]
PinType = Literal["power", "ground", "io", "analog", "digital"]


class ComponentPin(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    name: str
    type: PinType


class ComponentSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: ComponentCategory
    description: str
    voltage: float
    current_active: float | None = None  # mA
    current_sleep: float | None = None  # mA
    interfaces: list[str] = Field(default_factory=list)
    footprint: str
    symbol: str
    pins: list[ComponentPin] = Field(default_factory=list)
    price: float
    supplier: str
    datasheet: str | None = None


class PowerConsumption(BaseModel):
    active_total: float = 0.0
    sleep_total: float = 0.0


class PowerProfileRequest(BaseModel):
    component_ids: list[str] = Field(default_factory=list)
    battery_capacity_mah: float = Field(default=2000, gt=0)
    active_duty_cycle: float = Field(default=0.05, ge=0.0, le=1.0)


class PowerProfile(PowerConsumption):
    battery_capacity_mah: float
    active_duty_cycle: float
    average_current: float
    battery_life_hours: float | None = None
    battery_life_days: float | None = None
