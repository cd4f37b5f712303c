"""Tests for the structural validator, default placement and smoke test."""

from pcb_designer.schemas.design import Component, Connection
from pcb_designer.validation.structure import (
    generate_default_coordinates,
    smoke_test_pcb_generation,
    validate_structure,
)


def _mcu(reference: str = "U1", x: float | None = 0, y: float | None = 0) -> Component:
    return Component(reference=reference, name="ESP32-WROOM-32U", x=x, y=y)


def _usb(reference: str = "J1", x: float | None = 100, y: float | None = 0) -> Component:
    return Component(reference=reference, name="USB-C Receptacle", x=x, y=y)


def _conn(src: str, dst: str, signal: str = "GND") -> Connection:
    return Connection(from_ref=src, to_ref=dst, signal=signal)


# ═══════════════════════════════════════════════════════════
# validate_structure
# ═══════════════════════════════════════════════════════════


class TestValidateStructure:
    def test_empty_design_fails_early(self):
        result = validate_structure([], [_conn("U1", "J1")])
        assert result.is_valid is False
        assert result.errors == ["No components were generated"]
        assert result.warnings == []
        assert result.info == []

    def test_clean_design(self):
        result = validate_structure([_mcu(), _usb()], [_conn("U1", "J1")])
        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []
        assert result.info == ["2 components identified", "1 connections identified"]

    def test_duplicate_reference(self):
        result = validate_structure([_mcu("U1"), _mcu("U1", 200)], [])
        assert result.is_valid is False
        assert "Duplicate reference: U1" in result.errors

    def test_missing_reference(self):
        result = validate_structure([Component(name="ESP32", x=0, y=0)], [])
        assert result.is_valid is False
        assert "Component ESP32 has no reference designator" in result.errors

    def test_missing_name(self):
        result = validate_structure([Component(reference="U7", x=0, y=0)], [])
        assert "Component U7 has no name" in result.errors

    def test_dangling_connection(self):
        result = validate_structure([_mcu(), _usb()], [_conn("U1", "U9")])
        assert result.is_valid is False
        assert result.errors == ["Connection references unknown component: U9"]

    def test_incomplete_connection(self):
        result = validate_structure([_mcu(), _usb()], [_conn("", "U1")])
        assert result.errors == [
            "Connection 1 is incomplete (missing source or destination)"
        ]

    def test_unlabelled_connection_is_warning(self):
        result = validate_structure([_mcu(), _usb()], [_conn("U1", "J1", "")])
        assert result.is_valid is True
        assert result.warnings == ["Connection 1 has no signal label"]

    def test_heuristic_warnings(self):
        parts = [Component(reference="R1", name="10k Resistor")]
        result = validate_structure(parts, [])
        assert result.is_valid is True
        assert result.warnings == [
            "No connections were defined",
            "No microcontroller identified in the design",
            "No power components identified",
            "Some components have no coordinates for visualization",
        ]

    def test_input_untouched(self):
        components = [_mcu(), _usb(x=None, y=None)]
        before = [c.model_dump() for c in components]
        validate_structure(components, [])
        assert [c.model_dump() for c in components] == before


# ═══════════════════════════════════════════════════════════
# generate_default_coordinates
# ═══════════════════════════════════════════════════════════


class TestDefaultCoordinates:
    def test_four_component_grid(self):
        parts = [Component(reference=f"U{i}", name="IC") for i in range(4)]
        placed = generate_default_coordinates(parts)
        assert [(c.x, c.y) for c in placed] == [(-2, -2), (0, -2), (-2, 0), (0, 0)]

    def test_three_component_grid(self):
        parts = [Component(reference=f"U{i}", name="IC") for i in range(3)]
        placed = generate_default_coordinates(parts)
        assert [(c.x, c.y) for c in placed] == [(-2, -2), (0, -2), (-2, 0)]

    def test_positioned_components_kept(self):
        fixed = _mcu(x=42, y=7)
        floating = Component(reference="U2", name="IC")
        placed = generate_default_coordinates([fixed, floating])
        assert placed[0] is fixed
        assert (placed[1].x, placed[1].y) == (0, -1)

    def test_input_not_mutated(self):
        floating = Component(reference="U1", name="IC")
        generate_default_coordinates([floating])
        assert floating.x is None and floating.y is None

    def test_empty(self):
        assert generate_default_coordinates([]) == []


# ═══════════════════════════════════════════════════════════
# smoke_test_pcb_generation
# ═══════════════════════════════════════════════════════════


class TestSmokeTest:
    def test_clean_design_passes_every_check(self):
        result = smoke_test_pcb_generation([_mcu(), _usb()], [_conn("U1", "J1")])
        assert result.passed is True
        assert result.results == [
            "PASS: 2 components generated",
            "PASS: All references are unique",
            "PASS: 1 valid connections",
            "PASS: All components have required fields",
        ]

    def test_duplicate_reference_fails(self):
        result = smoke_test_pcb_generation([_mcu("U1"), _mcu("U1", 200)], [])
        assert result.passed is False
        assert "FAIL: Duplicate references detected" in result.results

    def test_connection_check_skipped_without_connections(self):
        result = smoke_test_pcb_generation([_mcu()], [])
        assert len(result.results) == 3
        assert result.passed is True

    def test_unknown_endpoint_fails(self):
        result = smoke_test_pcb_generation([_mcu()], [_conn("U1", "U5")])
        assert "FAIL: Connections reference unknown components" in result.results

    def test_no_components(self):
        result = smoke_test_pcb_generation([], [])
        assert result.passed is False
        assert result.results[0] == "FAIL: No components generated"
