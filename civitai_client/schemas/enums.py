"""
Core enumerations of the public REST API and their wire strings.

The in-process values are stable snake_case identifiers. What the API
actually sends and expects lives in the registry tables below, installed
by initialize().
"""

from enum import Enum
from typing import Dict, Optional

from civitai_client.kernel.registry import EnumStringRegistry, get_registry


class ModelType(str, Enum):
    """Kind of model asset."""
    CHECKPOINT = "checkpoint"
    TEXTUAL_INVERSION = "textual_inversion"
    HYPERNETWORK = "hypernetwork"
    AESTHETIC_GRADIENT = "aesthetic_gradient"
    LORA = "lora"
    LOCON = "locon"
    DORA = "dora"
    CONTROLNET = "controlnet"
    POSES = "poses"
    UPSCALER = "upscaler"
    MOTION_MODULE = "motion_module"
    VAE = "vae"
    WILDCARDS = "wildcards"
    WORKFLOWS = "workflows"
    OTHER = "other"


class ModelSort(str, Enum):
    HIGHEST_RATED = "highest_rated"
    MOST_DOWNLOADED = "most_downloaded"
    NEWEST = "newest"


class ImageSort(str, Enum):
    MOST_REACTIONS = "most_reactions"
    MOST_COMMENTS = "most_comments"
    MOST_COLLECTED = "most_collected"
    NEWEST = "newest"
    OLDEST = "oldest"
    RANDOM = "random"


class TimePeriod(str, Enum):
    ALL_TIME = "all_time"
    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"


class CommercialUsePermission(str, Enum):
    NONE = "none"
    IMAGE = "image"
    RENT = "rent"
    RENT_CIVIT = "rent_civit"
    SELL = "sell"


class ImageNsfwLevel(str, Enum):
    NONE = "none"
    SOFT = "soft"
    MATURE = "mature"
    EXPLICIT = "explicit"


class ModelMode(str, Enum):
    ARCHIVED = "archived"
    TAKEN_DOWN = "taken_down"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class Availability(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    ARCHIVED = "archived"
    UNSEARCHABLE = "unsearchable"


WIRE_STRINGS: Dict[type, Dict[Enum, str]] = {
    ModelType: {
        ModelType.CHECKPOINT: "Checkpoint",
        ModelType.TEXTUAL_INVERSION: "TextualInversion",
        ModelType.HYPERNETWORK: "Hypernetwork",
        ModelType.AESTHETIC_GRADIENT: "AestheticGradient",
        ModelType.LORA: "LORA",
        ModelType.LOCON: "LoCon",
        ModelType.DORA: "DoRA",
        ModelType.CONTROLNET: "Controlnet",
        ModelType.POSES: "Poses",
        ModelType.UPSCALER: "Upscaler",
        ModelType.MOTION_MODULE: "MotionModule",
        ModelType.VAE: "VAE",
        ModelType.WILDCARDS: "Wildcards",
        ModelType.WORKFLOWS: "Workflows",
        ModelType.OTHER: "Other",
    },
    ModelSort: {
        ModelSort.HIGHEST_RATED: "Highest Rated",
        ModelSort.MOST_DOWNLOADED: "Most Downloaded",
        ModelSort.NEWEST: "Newest",
    },
    ImageSort: {
        ImageSort.MOST_REACTIONS: "Most Reactions",
        ImageSort.MOST_COMMENTS: "Most Comments",
        ImageSort.MOST_COLLECTED: "Most Collected",
        ImageSort.NEWEST: "Newest",
        ImageSort.OLDEST: "Oldest",
        ImageSort.RANDOM: "Random",
    },
    TimePeriod: {
        TimePeriod.ALL_TIME: "AllTime",
        TimePeriod.YEAR: "Year",
        TimePeriod.MONTH: "Month",
        TimePeriod.WEEK: "Week",
        TimePeriod.DAY: "Day",
    },
    CommercialUsePermission: {
        CommercialUsePermission.NONE: "None",
        CommercialUsePermission.IMAGE: "Image",
        CommercialUsePermission.RENT: "Rent",
        CommercialUsePermission.RENT_CIVIT: "RentCivit",
        CommercialUsePermission.SELL: "Sell",
    },
    ImageNsfwLevel: {
        ImageNsfwLevel.NONE: "None",
        ImageNsfwLevel.SOFT: "Soft",
        ImageNsfwLevel.MATURE: "Mature",
        ImageNsfwLevel.EXPLICIT: "X",
    },
    ModelMode: {
        ModelMode.ARCHIVED: "Archived",
        ModelMode.TAKEN_DOWN: "TakenDown",
    },
    MediaType: {
        MediaType.IMAGE: "image",
        MediaType.VIDEO: "video",
    },
    Availability: {
        Availability.PUBLIC: "Public",
        Availability.PRIVATE: "Private",
        Availability.ARCHIVED: "Archived",
        Availability.UNSEARCHABLE: "Unsearchable",
    },
}


def initialize(registry: Optional[EnumStringRegistry] = None) -> EnumStringRegistry:
    """Register the core API enums. Idempotent and order-independent."""
    registry = registry or get_registry()
    for enum_type, mapping in WIRE_STRINGS.items():
        registry.register_many(enum_type, mapping)
    return registry
