"""PCB Data Validator — structural checks on a generated design.

Runs before DRC. Checks referential integrity of the snapshot itself:
references present and unique, names present, every connection endpoint
resolving to a component. Pure; never mutates its input.
"""

from __future__ import annotations

import math
from typing import Sequence

from pcb_designer.schemas.design import Component, Connection
from pcb_designer.schemas.validation import (
    GenerationSmokeTest,
    StructuralValidationResult,
)
from pcb_designer.validation.predicates import is_microcontroller, suggests_power_role


def validate_structure(
    components: Sequence[Component],
    connections: Sequence[Connection],
) -> StructuralValidationResult:
    result = StructuralValidationResult()

    # 1. Components
    if not components:
        result.errors.append("No components were generated")
        result.is_valid = False
        return result

    result.info.append(f"{len(components)} components identified")

    references: set[str] = set()
    for comp in components:
        if not comp.reference:
            result.errors.append(
                f"Component {comp.name} has no reference designator"
            )
            result.is_valid = False
        elif comp.reference in references:
            result.errors.append(f"Duplicate reference: {comp.reference}")
            result.is_valid = False
        else:
            references.add(comp.reference)

        if not comp.name:
            result.errors.append(f"Component {comp.reference} has no name")
            result.is_valid = False

    # 2. Connections
    if not connections:
        result.warnings.append("No connections were defined")
    else:
        result.info.append(f"{len(connections)} connections identified")

        for idx, conn in enumerate(connections, start=1):
            if not conn.from_ref or not conn.to_ref:
                result.errors.append(
                    f"Connection {idx} is incomplete (missing source or destination)"
                )
                result.is_valid = False

            if not conn.signal:
                result.warnings.append(f"Connection {idx} has no signal label")

            for endpoint in (conn.from_ref, conn.to_ref):
                if endpoint and endpoint not in references:
                    result.errors.append(
                        f"Connection references unknown component: {endpoint}"
                    )
                    result.is_valid = False

    # 3. Essential parts
    if not any(is_microcontroller(c) for c in components):
        result.warnings.append("No microcontroller identified in the design")

    if not any(suggests_power_role(c) for c in components):
        result.warnings.append("No power components identified")

    # 4. Coordinates for the schematic view
    if not all(c.has_position for c in components):
        result.warnings.append(
            "Some components have no coordinates for visualization"
        )

    return result


def generate_default_coordinates(components: Sequence[Component]) -> list[Component]:
    """Place unpositioned components on a centred grid.

    Uses ``ceil(sqrt(n))`` columns; index ``i`` goes to column ``i % cols``
    and row ``i // cols``. Positioned components are returned as-is.
    """
    count = len(components)
    if count == 0:
        return []

    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)

    placed: list[Component] = []
    for idx, comp in enumerate(components):
        if comp.has_position:
            placed.append(comp)
            continue
        row, col = divmod(idx, cols)
        placed.append(
            comp.model_copy(update={"x": col * 2 - cols, "y": row * 2 - rows})
        )
    return placed


def smoke_test_pcb_generation(
    components: Sequence[Component],
    connections: Sequence[Connection],
) -> GenerationSmokeTest:
    """Golden self-check run against any generated design."""
    results: list[str] = []
    passed = True

    # Test 1: components generated
    if not components:
        results.append("FAIL: No components generated")
        passed = False
    else:
        results.append(f"PASS: {len(components)} components generated")

    # Test 2: unique references
    references = {c.reference for c in components}
    if len(references) != len(components):
        results.append("FAIL: Duplicate references detected")
        passed = False
    else:
        results.append("PASS: All references are unique")

    # Test 3: connections resolve
    if connections:
        resolved = all(
            conn.from_ref in references and conn.to_ref in references
            for conn in connections
        )
        if resolved:
            results.append(f"PASS: {len(connections)} valid connections")
        else:
            results.append("FAIL: Connections reference unknown components")
            passed = False

    # Test 4: required fields
    if all(c.name and c.reference for c in components):
        results.append("PASS: All components have required fields")
    else:
        results.append("FAIL: Components missing required fields")
        passed = False

    return GenerationSmokeTest(passed=passed, results=results)
