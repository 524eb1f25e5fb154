from energysim.config.settings import (
    EfficiencyScoreWeights,
    EmissionFactors,
    GridStressWeights,
    Settings,
    SimulationConfig,
    TariffRates,
    TariffTimeRange,
    get_default_config,
    get_settings,
    resolve_config,
)

__all__ = [
    "EfficiencyScoreWeights",
    "EmissionFactors",
    "GridStressWeights",
    "Settings",
    "SimulationConfig",
    "TariffRates",
    "TariffTimeRange",
    "get_default_config",
    "get_settings",
    "resolve_config",
]
