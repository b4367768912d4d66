"""
AIR (AI Resource) identifiers.

Format: urn:air:{ecosystem}:{type}:{source}:{modelId}@{versionId}
Example: urn:air:sdxl:lora:civitai:328553@368189

The three enum segments are translated through the registry, so parsing
and formatting stay consistent with every other wire value.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from civitai_client.kernel.errors import UnknownWireValue
from civitai_client.kernel.registry import EnumStringRegistry, get_registry


class AirEcosystem(str, Enum):
    STABLE_DIFFUSION_1 = "stable_diffusion_1"
    STABLE_DIFFUSION_2 = "stable_diffusion_2"
    STABLE_DIFFUSION_XL = "stable_diffusion_xl"
    FLUX_1 = "flux_1"
    PONY = "pony"


class AirAssetType(str, Enum):
    CHECKPOINT = "checkpoint"
    LORA = "lora"
    LYCORIS = "lycoris"
    VAE = "vae"
    EMBEDDING = "embedding"
    HYPERNETWORK = "hypernetwork"


class AirSource(str, Enum):
    CIVITAI = "civitai"
    HUGGING_FACE = "hugging_face"
    OPENAI = "openai"
    LEONARDO = "leonardo"


WIRE_STRINGS: Dict[type, Dict[Enum, str]] = {
    AirEcosystem: {
        AirEcosystem.STABLE_DIFFUSION_1: "sd1",
        AirEcosystem.STABLE_DIFFUSION_2: "sd2",
        AirEcosystem.STABLE_DIFFUSION_XL: "sdxl",
        AirEcosystem.FLUX_1: "flux1",
        AirEcosystem.PONY: "pony",
    },
    AirAssetType: {
        AirAssetType.CHECKPOINT: "checkpoint",
        AirAssetType.LORA: "lora",
        AirAssetType.LYCORIS: "lycoris",
        AirAssetType.VAE: "vae",
        AirAssetType.EMBEDDING: "embedding",
        AirAssetType.HYPERNETWORK: "hypernet",
    },
    AirSource: {
        AirSource.CIVITAI: "civitai",
        AirSource.HUGGING_FACE: "huggingface",
        AirSource.OPENAI: "openai",
        AirSource.LEONARDO: "leonardo",
    },
}

AIR_PATTERN = re.compile(r"^urn:air:([a-z0-9]+):([a-z]+):([a-z]+):(\d+)@(\d+)$", re.IGNORECASE)


def initialize(registry: Optional[EnumStringRegistry] = None) -> EnumStringRegistry:
    """Register the AIR segment enums. Idempotent and order-independent."""
    registry = registry or get_registry()
    for enum_type, mapping in WIRE_STRINGS.items():
        registry.register_many(enum_type, mapping)
    return registry


@dataclass(frozen=True)
class AirIdentifier:
    """Reference to one version of a model, usable across providers."""

    ecosystem: AirEcosystem
    asset_type: AirAssetType
    source: AirSource
    model_id: int
    version_id: int

    def __post_init__(self) -> None:
        if self.model_id < 1:
            raise ValueError(f"model_id must be >= 1, got {self.model_id}")
        if self.version_id < 1:
            raise ValueError(f"version_id must be >= 1, got {self.version_id}")

    @classmethod
    def create(
        cls,
        ecosystem: AirEcosystem,
        asset_type: AirAssetType,
        model_id: int,
        version_id: int,
    ) -> "AirIdentifier":
        """Identifier for a Civitai-hosted asset."""
        return cls(ecosystem, asset_type, AirSource.CIVITAI, model_id, version_id)

    @classmethod
    def try_parse(
        cls,
        value: Optional[str],
        registry: Optional[EnumStringRegistry] = None,
    ) -> Optional["AirIdentifier"]:
        """Parse an AIR string, or None when it is malformed or uses unknown segments."""
        if not value or not value.strip():
            return None
        match = AIR_PATTERN.match(value.strip())
        if match is None:
            return None

        registry = registry or get_registry()
        ecosystem_str, type_str, source_str, model_str, version_str = match.groups()
        try:
            ecosystem = registry.from_wire(AirEcosystem, ecosystem_str)
            asset_type = registry.from_wire(AirAssetType, type_str)
            source = registry.from_wire(AirSource, source_str)
        except UnknownWireValue:
            return None

        model_id, version_id = int(model_str), int(version_str)
        if model_id < 1 or version_id < 1:
            return None
        return cls(ecosystem, asset_type, source, model_id, version_id)

    @classmethod
    def parse(cls, value: str, registry: Optional[EnumStringRegistry] = None) -> "AirIdentifier":
        """Parse an AIR string. Raises ValueError when it is not valid."""
        result = cls.try_parse(value, registry)
        if result is None:
            raise ValueError(
                f"{value!r} is not a valid AIR identifier. Expected format: "
                "urn:air:{ecosystem}:{type}:{source}:{modelId}@{versionId}"
            )
        return result

    def format(self, registry: Optional[EnumStringRegistry] = None) -> str:
        registry = registry or get_registry()
        return (
            f"urn:air:{registry.to_wire(AirEcosystem, self.ecosystem)}"
            f":{registry.to_wire(AirAssetType, self.asset_type)}"
            f":{registry.to_wire(AirSource, self.source)}"
            f":{self.model_id}@{self.version_id}"
        )

    def __str__(self) -> str:
        return self.format()
