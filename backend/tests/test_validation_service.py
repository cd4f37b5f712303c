"""Tests for the structure-then-DRC validation service."""

from pcb_designer.schemas.design import Component, Connection, DesignSnapshot, PowerSpecs
from pcb_designer.schemas.drc import DRCErrorType, DRCRules
from pcb_designer.services.validation_service import run_design_validation


def _valid_design() -> DesignSnapshot:
    return DesignSnapshot(
        components=[
            Component(reference="U1", name="ESP32-WROOM-32U", x=0, y=0),
            Component(reference="J1", name="USB-C Receptacle", x=200, y=0),
        ],
        connections=[
            Connection(from_ref="J1", to_ref="U1", signal="VCC_5V"),
            Connection(from_ref="J1", to_ref="U1", signal="GND"),
        ],
        power_specs=PowerSpecs(current_active="240mA"),
    )


def _broken_design() -> DesignSnapshot:
    return DesignSnapshot(
        components=[
            Component(reference="U1", name="ESP32", x=0, y=0),
            Component(reference="U1", name="ESP32", x=1, y=0),
        ],
    )


class TestRunDesignValidation:
    def test_clean_design_has_no_findings(self):
        report = run_design_validation(_valid_design())
        assert report.drc_ran is True
        assert report.structure.is_valid is True
        assert report.findings == []
        assert report.summary.errors == 0

    def test_structural_errors_gate_drc(self):
        report = run_design_validation(_broken_design(), enforce_structure=True)
        assert report.structure.is_valid is False
        assert report.drc_ran is False
        assert report.findings == []

    def test_gate_can_be_disabled(self):
        report = run_design_validation(_broken_design(), enforce_structure=False)
        assert report.drc_ran is True
        assert report.findings[0].type == DRCErrorType.CLEARANCE
        assert report.summary.errors == len(
            [f for f in report.findings if f.severity == "error"]
        )

    def test_empty_design_skips_drc(self):
        report = run_design_validation(DesignSnapshot(), enforce_structure=False)
        assert report.drc_ran is False
        assert report.structure.errors == ["No components were generated"]

    def test_custom_rules(self):
        design = _valid_design()
        report = run_design_validation(design, rules=DRCRules(min_clearance=1.5))
        assert [f.type for f in report.findings] == [DRCErrorType.CLEARANCE]
