"""Named classification predicates shared by the structural validator and DRC.

Each rule is a substring/prefix heuristic over LLM-produced labels, kept as
an explicit table so it can be tested and extended on its own.
"""

from __future__ import annotations

from typing import Iterable

from pcb_designer.schemas.design import Component

POWER_SIGNAL_TOKENS = ("VCC", "GND", "3V3", "5V")
GROUND_SIGNAL_TOKEN = "GND"
CRITICAL_SIGNAL_TOKENS = ("SPI", "I2C", "UART", "SCL", "SDA", "MOSI", "MISO", "SCK")
PASSIVE_REFERENCE_PREFIXES = ("R", "C")
MICROCONTROLLER_NAME_TOKENS = ("ESP32", "MCU", "Arduino")
POWER_ROLE_NAME_TOKENS = ("VCC", "GND", "USB")
CONNECTOR_REFERENCE_PREFIX = "J"
POWER_COMPONENT_NAME_TOKENS = ("AMS1117", "VREG")
IC_REFERENCE_PREFIX = "U"


def contains_any(text: str, tokens: Iterable[str]) -> bool:
    return any(token in text for token in tokens)


def is_power_signal(signal: str) -> bool:
    """Case-sensitive: ``vcc`` is not a power net."""
    return contains_any(signal, POWER_SIGNAL_TOKENS)


def is_ground_signal(signal: str) -> bool:
    return GROUND_SIGNAL_TOKEN in signal


def is_critical_signal(signal: str) -> bool:
    """High-speed / bus signals, matched case-insensitively."""
    return contains_any(signal.upper(), CRITICAL_SIGNAL_TOKENS)


def is_passive_reference(reference: str) -> bool:
    return reference.startswith(PASSIVE_REFERENCE_PREFIXES)


def is_microcontroller(component: Component) -> bool:
    return contains_any(component.name, MICROCONTROLLER_NAME_TOKENS)


def suggests_power_role(component: Component) -> bool:
    return contains_any(
        component.name, POWER_ROLE_NAME_TOKENS
    ) or component.reference.startswith(CONNECTOR_REFERENCE_PREFIX)


def is_power_component(component: Component) -> bool:
    """Regulators and ICs — the parts that dissipate heat."""
    return contains_any(
        component.name, POWER_COMPONENT_NAME_TOKENS
    ) or component.reference.startswith(IC_REFERENCE_PREFIX)
