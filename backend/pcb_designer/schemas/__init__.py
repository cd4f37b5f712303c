from pcb_designer.schemas.design import Component, Connection, PowerSpecs, DesignSnapshot
from pcb_designer.schemas.drc import DRCError, DRCRules, DEFAULT_DRC_RULES
from pcb_designer.schemas.validation import StructuralValidationResult
from pcb_designer.schemas.component import ComponentSpec
from pcb_designer.schemas.project import GeneratedProject
from pcb_designer.schemas.quote import FabQuote

__all__ = [
    "Component",
    "Connection",
    "PowerSpecs",
    "DesignSnapshot",
    "DRCError",
    "DRCRules",
    "DEFAULT_DRC_RULES",
    "StructuralValidationResult",
    "ComponentSpec",
    "GeneratedProject",
    "FabQuote",
]
