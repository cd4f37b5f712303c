from __future__ import annotations

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

from pcb_designer.schemas.design import DesignSnapshot
from pcb_designer.schemas.validation import StructuralValidationResult


class DRCErrorType(str, Enum):
    CLEARANCE = "clearance"
    ROUTING = "routing"
    POWER = "power"
    THERMAL = "thermal"
    SIGNAL_INTEGRITY = "signal_integrity"


class DRCSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class DRCRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_trace_width: float = 0.15  # mm (6 mil)
    min_clearance: float = 0.15  # mm (6 mil)
    min_via_diameter: float = 0.3  # mm
    max_current_per_trace: float = 1.0  # A
    max_board_temp: float = 85  # °C


DEFAULT_DRC_RULES = DRCRules()


class Location(BaseModel):
    x: float
    y: float


class DRCError(BaseModel):
    type: DRCErrorType
    severity: DRCSeverity
    message: str
    components: list[str] | None = None
    location: Location | None = None


class DRCSummary(BaseModel):
    errors: int = 0
    warnings: int = 0
    info: int = 0


class DesignValidationRequest(DesignSnapshot):
    rules: DRCRules | None = None


class DesignValidationReport(BaseModel):
    structure: StructuralValidationResult
    findings: list[DRCError] = Field(default_factory=list)
    summary: DRCSummary = Field(default_factory=DRCSummary)
    drc_ran: bool = False
