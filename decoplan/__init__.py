"""
Bühlmann ZH-L16C decompression planning.

Modules:
    - buhlmann_constants: ZH-L16C coefficients, gradient factors, Haldane/Schreiner
    - pressure: ambient/inspired pressure, MOD/EAD and unit conversions
    - gas: GasMix and the validation run before planning
    - tissue_model: 16-compartment inert gas loading
    - ceiling: per-compartment and overall ceiling
    - scheduler: stop scheduling and DecompressionPlan
    - config: config.yaml loading
    - plotting: plan depth/runtime chart
"""

from .buhlmann_constants import GradientFactors, GF_DEFAULT
from .gas import GasMix, ValidationError, DEFAULT_GAS_MIXES
from .tissue_model import TissueCompartmentModel, Compartment, DiveSegment
from .ceiling import compute_ceiling
from .scheduler import (
    DecompressionPlan,
    DecompressionScheduler,
    DecompressionStop,
    compute_decompression_plan,
)
from .config import load_effective_config

__version__ = "0.1.0"

__all__ = [
    "GradientFactors",
    "GF_DEFAULT",
    "GasMix",
    "ValidationError",
    "DEFAULT_GAS_MIXES",
    "TissueCompartmentModel",
    "Compartment",
    "DiveSegment",
    "compute_ceiling",
    "DecompressionPlan",
    "DecompressionScheduler",
    "DecompressionStop",
    "compute_decompression_plan",
    "load_effective_config",
]
