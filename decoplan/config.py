"""
Planner configuration from config.yaml.

Resolves gradient factors, the default breathing gas and scheduler settings
with the precedence: CLI override > config file > built-in defaults.
"""

import os

import yaml

from .buhlmann_constants import GradientFactors, GF_DEFAULT
from .gas import AIR, GasMix


def default_config_path() -> str:
    return os.path.join(os.path.dirname(os.path.dirname(__file__)), "config.yaml")


def load_effective_config(
    gf_override: tuple = None,
    config_path: str = None,
) -> dict:
    """Load configuration from config.yaml with optional CLI GF override.

    Args:
        gf_override: (gf_low, gf_high) in percent, e.g. (30, 85)
        config_path: YAML file; defaults to config.yaml at the project root

    Returns a dict with resolved settings:
        gf:              GradientFactors instance
        gas:             GasMix instance
        deco:            dict of scheduler settings (may be empty)
        config_path:     str (resolved path)
        gf_source:       'cli' | 'config' | 'default'
    """
    if config_path is None:
        config_path = default_config_path()

    gf = GF_DEFAULT
    gf_source = "default"
    gas = AIR
    deco_cfg = {}

    if os.path.exists(config_path):
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}

        buhlmann_cfg = config.get("buhlmann", {})
        if buhlmann_cfg:
            gf = GradientFactors(
                gf_low=float(buhlmann_cfg.get("gf_low", GF_DEFAULT.gf_low)),
                gf_high=float(buhlmann_cfg.get("gf_high", GF_DEFAULT.gf_high)),
            )
            gf_source = "config"

        gas_cfg = config.get("gas", {})
        if gas_cfg:
            gas = GasMix(
                o2=float(gas_cfg.get("o2", AIR.o2)),
                he=float(gas_cfg.get("he", AIR.he)),
                max_po2=float(gas_cfg.get("max_po2", AIR.max_po2)),
                name=str(gas_cfg.get("name", "")),
            )

        deco_cfg = dict(config.get("deco", {}) or {})

    if gf_override:
        gf = GradientFactors(
            gf_low=gf_override[0] / 100.0,
            gf_high=gf_override[1] / 100.0,
        )
        gf_source = "cli"

    return {
        "gf": gf,
        "gas": gas,
        "deco": deco_cfg,
        "config_path": config_path,
        "gf_source": gf_source,
    }
