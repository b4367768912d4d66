"""
Provider coverage records from the orchestration API.
"""

from civitai_client.generation.enums import AvailabilityStatus
from civitai_client.kernel.converters import WireEnum
from civitai_client.schemas.common import ApiModel


class ProviderAssetAvailability(ApiModel):
    """Availability of one asset (keyed by AIR in the response) on the generation network."""

    availability: WireEnum(AvailabilityStatus)
    workers: int = 0
