"""Design validation service — structural gate followed by DRC.

Structure → DRC → summary
"""

from __future__ import annotations

import logging

from pcb_designer.config import get_settings
from pcb_designer.schemas.design import DesignSnapshot
from pcb_designer.schemas.drc import DEFAULT_DRC_RULES, DesignValidationReport, DRCRules
from pcb_designer.validation.drc import summarize_findings, validate_design
from pcb_designer.validation.structure import validate_structure

logger = logging.getLogger(__name__)


def run_design_validation(
    design: DesignSnapshot,
    rules: DRCRules | None = None,
    enforce_structure: bool | None = None,
) -> DesignValidationReport:
    """Validate a design snapshot end to end.

    Args:
        design: Components, connections and optional power specs.
        rules: DRC thresholds. Defaults to DEFAULT_DRC_RULES.
        enforce_structure: Skip DRC when the structure is invalid.
            Defaults to ``Settings.drc_enforce_structure``.

    Returns:
        DesignValidationReport. ``drc_ran`` is False when DRC was gated
        or the design has no components.
    """
    if enforce_structure is None:
        enforce_structure = get_settings().drc_enforce_structure

    structure = validate_structure(design.components, design.connections)

    if not design.components:
        return DesignValidationReport(structure=structure)

    if enforce_structure and not structure.is_valid:
        logger.info(
            "DRC skipped: design has %d structural error(s)", len(structure.errors)
        )
        return DesignValidationReport(structure=structure)

    findings = validate_design(
        design.components,
        design.connections,
        design.power_specs,
        rules or DEFAULT_DRC_RULES,
    )
    summary = summarize_findings(findings)
    logger.info(
        "DRC complete — components=%d, errors=%d, warnings=%d, info=%d",
        len(design.components),
        summary.errors,
        summary.warnings,
        summary.info,
    )

    return DesignValidationReport(
        structure=structure,
        findings=findings,
        summary=summary,
        drc_ran=True,
    )
