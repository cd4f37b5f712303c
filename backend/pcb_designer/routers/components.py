from fastapi import APIRouter, HTTPException, status

from pcb_designer.catalog.library import (
    COMPONENT_LIBRARY,
    estimate_power_profile,
    get_component_by_id,
    get_components_by_category,
)
from pcb_designer.schemas.component import (
    ComponentCategory,
    ComponentSpec,
    PowerProfile,
    PowerProfileRequest,
)

router = APIRouter()


@router.get("/", response_model=list[ComponentSpec])
async def list_all_components():
    """Return the full component catalog."""
    return list(COMPONENT_LIBRARY.values())


@router.get("/category/{category}", response_model=list[ComponentSpec])
async def list_by_category(category: ComponentCategory):
    """Return catalog entries of one category."""
    return get_components_by_category(category)


@router.post("/power", response_model=PowerProfile)
async def power_profile(request: PowerProfileRequest):
    """Estimate consumption and battery life for a list of catalog ids."""
    return estimate_power_profile(
        request.component_ids,
        battery_capacity_mah=request.battery_capacity_mah,
        active_duty_cycle=request.active_duty_cycle,
    )


@router.get("/{component_id}", response_model=ComponentSpec)
async def get_component(component_id: str):
    """Return one catalog entry."""
    spec = get_component_by_id(component_id)
    if spec is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Component {component_id} not found",
        )
    return spec
