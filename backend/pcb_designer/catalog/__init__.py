from pcb_designer.catalog.library import (
    COMPONENT_LIBRARY,
    calculate_power_consumption,
    estimate_power_profile,
    get_component_by_id,
    get_components_by_category,
)

__all__ = [
    "COMPONENT_LIBRARY",
    "calculate_power_consumption",
    "estimate_power_profile",
    "get_component_by_id",
    "get_components_by_category",
]
