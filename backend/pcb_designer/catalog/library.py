"""Component Catalog — static reference data for known parts.

Loaded once from ``component_library.json`` at import time and exposed as a
read-only mapping. Consumed by the power estimate, the LLM system prompt and
the components router.
"""

from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from pcb_designer.schemas.component import (
    ComponentCategory,
    ComponentSpec,
    PowerConsumption,
    PowerProfile,
)

COMPONENT_LIBRARY_PATH = Path(__file__).parent / "component_library.json"

DEFAULT_BATTERY_CAPACITY_MAH = 2000
DEFAULT_ACTIVE_DUTY_CYCLE = 0.05  # 5% active, 95% sleep


def _load_component_library() -> Mapping[str, ComponentSpec]:
    """Load the component library into an immutable id→spec mapping."""
    with open(COMPONENT_LIBRARY_PATH, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return MappingProxyType(
        {comp_id: ComponentSpec(**data) for comp_id, data in raw.items()}
    )


COMPONENT_LIBRARY: Mapping[str, ComponentSpec] = _load_component_library()


def get_component_by_id(component_id: str) -> ComponentSpec | None:
    return COMPONENT_LIBRARY.get(component_id)


def get_components_by_category(category: ComponentCategory) -> list[ComponentSpec]:
    return [c for c in COMPONENT_LIBRARY.values() if c.category == category]


def calculate_power_consumption(component_ids: Iterable[str]) -> PowerConsumption:
    """Sum active and sleep current (mA) over catalog ids.

    Unknown ids are ignored; parts without a rated current count as 0.
    """
    active_total = 0.0
    sleep_total = 0.0

    for comp_id in component_ids:
        spec = COMPONENT_LIBRARY.get(comp_id)
        if spec is None:
            continue
        active_total += spec.current_active or 0
        sleep_total += spec.current_sleep or 0

    return PowerConsumption(active_total=active_total, sleep_total=sleep_total)


def estimate_power_profile(
    component_ids: Iterable[str],
    battery_capacity_mah: float = DEFAULT_BATTERY_CAPACITY_MAH,
    active_duty_cycle: float = DEFAULT_ACTIVE_DUTY_CYCLE,
) -> PowerProfile:
    """Estimate average current and battery life for a duty-cycled design."""
    consumption = calculate_power_consumption(component_ids)
    average = consumption.active_total * active_duty_cycle + consumption.sleep_total * (
        1 - active_duty_cycle
    )

    hours = battery_capacity_mah / average if average > 0 else None

    return PowerProfile(
        active_total=consumption.active_total,
        sleep_total=consumption.sleep_total,
        battery_capacity_mah=battery_capacity_mah,
        active_duty_cycle=active_duty_cycle,
        average_current=average,
        battery_life_hours=hours,
        battery_life_days=hours / 24 if hours is not None else None,
    )
