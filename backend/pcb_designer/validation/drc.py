"""Design Rule Check Engine — Deterministic Heuristic PCB Linter.

Pure Python. No AI. No I/O. Fully unit-testable.

Checks a design snapshot against 5 rules, in this fixed order:
  1. Component clearance (centre-to-centre distance)
  2. Power connections per component and a ground net for the design
  3. Signal integrity of bus signals and net fan-out
  4. Active current against trace capacity
  5. Thermal concentration around power components

Input:  components, connections, optional PowerSpecs, DRCRules
Output: ordered list[DRCError]; emission order is part of the contract
"""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Callable, Sequence

from pcb_designer.schemas.design import (
    Component,
    Connection,
    DesignSnapshot,
    PowerSpecs,
)
from pcb_designer.schemas.drc import (
    DEFAULT_DRC_RULES,
    DRCError,
    DRCErrorType,
    DRCRules,
    DRCSeverity,
    DRCSummary,
    Location,
)
from pcb_designer.validation.predicates import (
    is_critical_signal,
    is_ground_signal,
    is_passive_reference,
    is_power_component,
    is_power_signal,
)

# Schematic units per millimetre of clearance. Calibrated independently of
# the schematic rendering scale.
CLEARANCE_SCALE = 200
THERMAL_RADIUS = 100
THERMAL_MAX_NEIGHBOURS = 3
NET_MAX_CONNECTIONS = 3
HIGH_CURRENT_INFO_MA = 500

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# ─── Internal Helpers ───


def _distance(a: Component, b: Component) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def _positioned(components: Sequence[Component]) -> list[Component]:
    """Components with both coordinates; the rest cannot be measured."""
    return [c for c in components if c.has_position]


def _format_number(value: float) -> str:
    value = round(value, 6)
    return str(int(value)) if value.is_integer() else str(value)


def parse_current_ma(value: str | float | None) -> float | None:
    """Parse a current in mA the lenient way LLM output needs.

    Accepts numbers and strings with a leading number (``"1500mA"``).
    Anything else, including NaN and infinities, is treated as absent.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(value)
        if not match:
            return None
        number = float(match.group(0))
    return number if math.isfinite(number) else None


# ═══════════════════════════════════════════════════════════
# Check 1: Component Clearance
# ═══════════════════════════════════════════════════════════


def check_component_clearance(
    design: DesignSnapshot, rules: DRCRules
) -> list[DRCError]:
    """Flag every unordered pair of components closer than the minimum
    clearance. O(n²) over components; designs are tens of parts."""
    errors: list[DRCError] = []
    threshold = rules.min_clearance * CLEARANCE_SCALE
    components = _positioned(design.components)

    for i, first in enumerate(components):
        for second in components[i + 1 :]:
            distance = _distance(first, second)
            if distance >= threshold:
                continue
            errors.append(
                DRCError(
                    type=DRCErrorType.CLEARANCE,
                    severity=DRCSeverity.ERROR,
                    message=(
                        f"Insufficient clearance between {first.reference} and "
                        f"{second.reference} ({distance:.1f}px, minimum "
                        f"{_format_number(threshold)}px)"
                    ),
                    components=[first.reference, second.reference],
                    location=Location(
                        x=(first.x + second.x) / 2,
                        y=(first.y + second.y) / 2,
                    ),
                )
            )

    return errors


# ═══════════════════════════════════════════════════════════
# Check 2: Power Connections
# ═══════════════════════════════════════════════════════════


def check_power_connections(
    design: DesignSnapshot, rules: DRCRules
) -> list[DRCError]:
    """Every non-passive component needs a power net; the design needs GND."""
    errors: list[DRCError] = []
    power_connections = [c for c in design.connections if is_power_signal(c.signal)]

    powered: set[str] = set()
    for conn in power_connections:
        powered.add(conn.from_ref)
        powered.add(conn.to_ref)

    for comp in design.components:
        if comp.reference in powered or is_passive_reference(comp.reference):
            continue
        errors.append(
            DRCError(
                type=DRCErrorType.POWER,
                severity=DRCSeverity.ERROR,
                message=f"Component {comp.reference} has no power connection",
                components=[comp.reference],
                location=(
                    Location(x=comp.x, y=comp.y) if comp.has_position else None
                ),
            )
        )

    has_ground = any(is_ground_signal(c.signal) for c in power_connections)
    if design.components and not has_ground:
        errors.append(
            DRCError(
                type=DRCErrorType.POWER,
                severity=DRCSeverity.ERROR,
                message="No GND connection found in the design",
            )
        )

    return errors


# ═══════════════════════════════════════════════════════════
# Check 3: Signal Integrity
# ═══════════════════════════════════════════════════════════


def check_signal_integrity(
    design: DesignSnapshot, rules: DRCRules
) -> list[DRCError]:
    """Warn on bus/high-speed signals and on nets shared by many connections."""
    errors: list[DRCError] = []

    for conn in design.connections:
        if not is_critical_signal(conn.signal):
            continue
        errors.append(
            DRCError(
                type=DRCErrorType.SIGNAL_INTEGRITY,
                severity=DRCSeverity.WARNING,
                message=(
                    f"High-speed signal detected ({conn.signal}): "
                    "check routing and impedance"
                ),
                components=[conn.from_ref, conn.to_ref],
            )
        )

    # Counter keeps first-seen order, so output is stable for equal input
    signal_counts = Counter(conn.signal for conn in design.connections)
    for signal, count in signal_counts.items():
        if count > NET_MAX_CONNECTIONS:
            errors.append(
                DRCError(
                    type=DRCErrorType.ROUTING,
                    severity=DRCSeverity.WARNING,
                    message=(
                        f"Signal {signal} has multiple connections ({count}): "
                        "consider a uniquely named net"
                    ),
                )
            )

    return errors


# ═══════════════════════════════════════════════════════════
# Check 4: Power Consumption
# ═══════════════════════════════════════════════════════════


def check_power_consumption(
    design: DesignSnapshot, rules: DRCRules
) -> list[DRCError]:
    """Compare the declared active current against trace capacity and a
    fixed thermal-analysis threshold. Both may fire."""
    errors: list[DRCError] = []
    if design.power_specs is None:
        return errors

    current_ma = parse_current_ma(design.power_specs.current_active)
    if current_ma is None:
        return errors

    if current_ma > rules.max_current_per_trace * 1000:
        errors.append(
            DRCError(
                type=DRCErrorType.POWER,
                severity=DRCSeverity.WARNING,
                message=(
                    f"Active current too high ({_format_number(current_ma)}mA): "
                    "consider wider traces or copper planes"
                ),
            )
        )

    if current_ma > HIGH_CURRENT_INFO_MA:
        errors.append(
            DRCError(
                type=DRCErrorType.THERMAL,
                severity=DRCSeverity.INFO,
                message=(
                    f"High consumption detected ({_format_number(current_ma)}mA): "
                    "consider a detailed thermal analysis"
                ),
            )
        )

    return errors


# ═══════════════════════════════════════════════════════════
# Check 5: Thermal Concentration
# ═══════════════════════════════════════════════════════════


def check_thermal_design(
    design: DesignSnapshot, rules: DRCRules
) -> list[DRCError]:
    """Power components crowded by more than a few neighbours run hot."""
    errors: list[DRCError] = []
    components = _positioned(design.components)

    for comp in components:
        if not is_power_component(comp):
            continue

        neighbours = [
            other
            for other in components
            if other.reference != comp.reference
            and _distance(comp, other) < THERMAL_RADIUS
        ]
        if len(neighbours) > THERMAL_MAX_NEIGHBOURS:
            errors.append(
                DRCError(
                    type=DRCErrorType.THERMAL,
                    severity=DRCSeverity.WARNING,
                    message=(
                        f"Component {comp.reference} has {len(neighbours)} "
                        "components nearby: may cause overheating"
                    ),
                    components=[comp.reference],
                    location=Location(x=comp.x, y=comp.y),
                )
            )

    return errors


# ═══════════════════════════════════════════════════════════
# Main Validator
# ═══════════════════════════════════════════════════════════

DRCCheck = Callable[[DesignSnapshot, DRCRules], list[DRCError]]

# Order is the display contract
ALL_CHECKS: list[DRCCheck] = [
    check_component_clearance,
    check_power_connections,
    check_signal_integrity,
    check_power_consumption,
    check_thermal_design,
]


def validate_design(
    components: Sequence[Component],
    connections: Sequence[Connection],
    power_specs: PowerSpecs | None = None,
    rules: DRCRules = DEFAULT_DRC_RULES,
) -> list[DRCError]:
    """Run all DRC checks on a design and concatenate their findings.

    Args:
        components: Placed component instances.
        connections: Nets between component references.
        power_specs: Optional declared power figures.
        rules: Thresholds. Defaults to DEFAULT_DRC_RULES.

    Returns:
        Findings in check order (clearance, power, signal integrity,
        power consumption, thermal). Never raises for well-typed input.
    """
    design = DesignSnapshot(
        components=list(components),
        connections=list(connections),
        power_specs=power_specs,
    )
    findings: list[DRCError] = []
    for check_fn in ALL_CHECKS:
        findings.extend(check_fn(design, rules))
    return findings


def summarize_findings(findings: Sequence[DRCError]) -> DRCSummary:
    """Count findings per severity for display."""
    counts = Counter(f.severity for f in findings)
    return DRCSummary(
        errors=counts[DRCSeverity.ERROR],
        warnings=counts[DRCSeverity.WARNING],
        info=counts[DRCSeverity.INFO],
    )
