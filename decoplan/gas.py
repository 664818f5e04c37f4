"""
Breathing gas mixes and the validation applied before planning.

The tissue engine trusts its inputs; callers run these checks first.
"""

from dataclasses import dataclass
from typing import Dict

from .pressure import maximum_operating_depth


class ValidationError(ValueError):
    """Raised when a gas mix or planning request is not physically valid."""


@dataclass(frozen=True)
class GasMix:
    """Breathing gas as O2/He fractions; N2 is the remainder."""

    o2: float
    he: float = 0.0
    max_po2: float = 1.4
    name: str = ""

    @classmethod
    def from_percentages(
        cls, o2: float, he: float = 0.0, max_po2: float = 1.4, name: str = ""
    ) -> "GasMix":
        """Build a mix from percentages, e.g. 21/35 for Tx21/35."""
        return cls(o2=o2 / 100.0, he=he / 100.0, max_po2=max_po2, name=name)

    @property
    def n2(self) -> float:
        return 1.0 - self.o2 - self.he

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        o2_pct = int(round(self.o2 * 100))
        he_pct = int(round(self.he * 100))
        if he_pct:
            return f"Tx{o2_pct}/{he_pct}"
        if o2_pct == 21:
            return "Air"
        return f"EAN{o2_pct}"

    @property
    def mod(self) -> float:
        """Maximum operating depth (m) for this mix's max_po2."""
        return maximum_operating_depth(self.o2, self.max_po2)


AIR = GasMix(o2=0.21, he=0.0, name="Air")

DEFAULT_GAS_MIXES: Dict[str, GasMix] = {
    "AIR": AIR,
    "EAN32": GasMix(o2=0.32, he=0.0, name="EAN32"),
    "EAN36": GasMix(o2=0.36, he=0.0, name="EAN36"),
    "TX_18_45": GasMix(o2=0.18, he=0.45, name="Tx18/45"),
    "TX_21_35": GasMix(o2=0.21, he=0.35, name="Tx21/35"),
}


def validate_gas_mix(gas: GasMix) -> None:
    """Reject fractions outside [0, 1], O2 + He > 1 and odd ppO2 limits."""
    if not (0.0 <= gas.o2 <= 1.0):
        raise ValidationError(f"Invalid O2 fraction: {gas.o2}")
    if not (0.0 <= gas.he <= 1.0):
        raise ValidationError(f"Invalid He fraction: {gas.he}")
    # Tolerate float noise from percentage conversion (e.g. 0.79 + 0.21)
    if gas.o2 + gas.he > 1.0 + 1e-9:
        raise ValidationError("O2 + He cannot exceed 100%")
    if not (0.1 <= gas.max_po2 <= 2.0):
        raise ValidationError(f"Invalid max PO2: {gas.max_po2}")


def validate_plan_request(
    max_depth_m: float, bottom_time_min: float, gas: GasMix
) -> None:
    """Checks run before compute_decompression_plan is called."""
    if max_depth_m <= 0:
        raise ValidationError("Max depth must be greater than 0")
    if bottom_time_min <= 0:
        raise ValidationError("Bottom time must be greater than 0")
    validate_gas_mix(gas)
