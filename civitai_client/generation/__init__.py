"""
Orchestration (generation) API: enums and AIR identifiers.
"""

from civitai_client.generation.air import AirAssetType, AirEcosystem, AirIdentifier, AirSource
from civitai_client.generation.enums import (
    AvailabilityStatus,
    ControlNetPreprocessor,
    NetworkType,
    Scheduler,
)

__all__ = [
    "AirAssetType",
    "AirEcosystem",
    "AirIdentifier",
    "AirSource",
    "AvailabilityStatus",
    "ControlNetPreprocessor",
    "NetworkType",
    "Scheduler",
]
