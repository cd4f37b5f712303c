"""DRC router — stateless design validation endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from pcb_designer.schemas.design import Component, DesignSnapshot
from pcb_designer.schemas.drc import (
    DEFAULT_DRC_RULES,
    DesignValidationReport,
    DesignValidationRequest,
    DRCRules,
)
from pcb_designer.schemas.validation import (
    GenerationSmokeTest,
    StructuralValidationResult,
)
from pcb_designer.services.validation_service import run_design_validation
from pcb_designer.validation.structure import (
    generate_default_coordinates,
    smoke_test_pcb_generation,
    validate_structure,
)

router = APIRouter()


@router.get("/rules", response_model=DRCRules)
async def get_default_rules():
    """Return the default DRC thresholds."""
    return DEFAULT_DRC_RULES


@router.post("/validate", response_model=DesignValidationReport)
async def validate_inline(request: DesignValidationRequest):
    """Structural validation followed by DRC. Stateless."""
    return run_design_validation(request, rules=request.rules)


@router.post("/structure", response_model=StructuralValidationResult)
async def validate_structure_only(design: DesignSnapshot):
    """Referential-integrity checks only."""
    return validate_structure(design.components, design.connections)


@router.post("/coordinates", response_model=list[Component])
async def fill_coordinates(components: list[Component]):
    """Assign grid positions to components that have none."""
    return generate_default_coordinates(components)


@router.post("/smoke-test", response_model=GenerationSmokeTest)
async def smoke_test(design: DesignSnapshot):
    """Run the generation smoke test against a design."""
    return smoke_test_pcb_generation(design.components, design.connections)
