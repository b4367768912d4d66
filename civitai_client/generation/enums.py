"""
Enumerations of the orchestration (generation) API.
"""

from enum import Enum
from typing import Dict, Optional

from civitai_client.kernel.registry import EnumStringRegistry, get_registry


class Scheduler(str, Enum):
    """Sampling scheduler."""
    EULER = "euler"
    EULER_ANCESTRAL = "euler_ancestral"
    LINEAR_MULTISTEP = "linear_multistep"
    HEUN = "heun"
    DPM_2 = "dpm_2"
    DPM_2_ANCESTRAL = "dpm_2_ancestral"
    DPMPP_2S_ANCESTRAL = "dpmpp_2s_ancestral"
    DPMPP_2M = "dpmpp_2m"
    DPMPP_SDE = "dpmpp_sde"
    DPMPP_2M_SDE = "dpmpp_2m_sde"
    DPMPP_2M_SDE_KARRAS = "dpmpp_2m_sde_karras"
    DPMPP_3M_SDE = "dpmpp_3m_sde"
    DPMPP_3M_SDE_KARRAS = "dpmpp_3m_sde_karras"
    DDIM = "ddim"
    PLMS = "plms"
    UNI_PC = "uni_pc"
    UNI_PC_BH2 = "uni_pc_bh2"
    DDPM = "ddpm"
    LCM = "lcm"


class AvailabilityStatus(str, Enum):
    """Whether a provider can currently serve an asset."""
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    DEGRADED = "degraded"


class NetworkType(str, Enum):
    """Additional network applied on top of a checkpoint."""
    LORA = "lora"
    LYCORIS = "lycoris"
    DORA = "dora"
    EMBEDDING = "embedding"
    VAE = "vae"


class ControlNetPreprocessor(str, Enum):
    CANNY = "canny"
    DEPTH = "depth"
    DEPTH_LERES = "depth_leres"
    DEPTH_MIDAS = "depth_midas"
    DEPTH_ZOE = "depth_zoe"
    SOFTEDGE_HED = "softedge_hed"
    SOFTEDGE_PIDINET = "softedge_pidinet"
    LINEART = "lineart"
    LINEART_ANIME = "lineart_anime"
    OPENPOSE = "openpose"
    OPENPOSE_FACE = "openpose_face"
    OPENPOSE_FULL = "openpose_full"
    MEDIAPIPE_FACE = "mediapipe_face"
    NORMAL_BAE = "normal_bae"
    SEGMENTATION = "segmentation"
    SHUFFLE = "shuffle"
    TILE = "tile"
    INPAINT = "inpaint"
    MLSD = "mlsd"
    SCRIBBLE = "scribble"
    REMBG = "rembg"
    NONE = "none"


WIRE_STRINGS: Dict[type, Dict[Enum, str]] = {
    Scheduler: {
        Scheduler.EULER: "euler",
        Scheduler.EULER_ANCESTRAL: "euler_a",
        Scheduler.LINEAR_MULTISTEP: "lms",
        Scheduler.HEUN: "heun",
        Scheduler.DPM_2: "dpm_2",
        Scheduler.DPM_2_ANCESTRAL: "dpm_2_a",
        Scheduler.DPMPP_2S_ANCESTRAL: "dpmpp_2s_a",
        Scheduler.DPMPP_2M: "dpmpp_2m",
        Scheduler.DPMPP_SDE: "dpmpp_sde",
        Scheduler.DPMPP_2M_SDE: "dpmpp_2m_sde",
        Scheduler.DPMPP_2M_SDE_KARRAS: "dpmpp_2m_sde_karras",
        Scheduler.DPMPP_3M_SDE: "dpmpp_3m_sde",
        Scheduler.DPMPP_3M_SDE_KARRAS: "dpmpp_3m_sde_karras",
        Scheduler.DDIM: "ddim",
        Scheduler.PLMS: "plms",
        Scheduler.UNI_PC: "uni_pc",
        Scheduler.UNI_PC_BH2: "uni_pc_bh2",
        Scheduler.DDPM: "ddpm",
        Scheduler.LCM: "lcm",
    },
    AvailabilityStatus: {
        AvailabilityStatus.AVAILABLE: "Available",
        AvailabilityStatus.UNAVAILABLE: "Unavailable",
        AvailabilityStatus.DEGRADED: "Degraded",
    },
    NetworkType: {
        NetworkType.LORA: "lora",
        NetworkType.LYCORIS: "lycoris",
        NetworkType.DORA: "dora",
        NetworkType.EMBEDDING: "embedding",
        NetworkType.VAE: "vae",
    },
    ControlNetPreprocessor: {
        ControlNetPreprocessor.CANNY: "canny",
        ControlNetPreprocessor.DEPTH: "depth",
        ControlNetPreprocessor.DEPTH_LERES: "depth_leres",
        ControlNetPreprocessor.DEPTH_MIDAS: "depth_midas",
        ControlNetPreprocessor.DEPTH_ZOE: "depth_zoe",
        ControlNetPreprocessor.SOFTEDGE_HED: "softedge_hed",
        ControlNetPreprocessor.SOFTEDGE_PIDINET: "softedge_pidinet",
        ControlNetPreprocessor.LINEART: "lineart",
        ControlNetPreprocessor.LINEART_ANIME: "lineart_anime",
        ControlNetPreprocessor.OPENPOSE: "openpose",
        ControlNetPreprocessor.OPENPOSE_FACE: "openpose_face",
        ControlNetPreprocessor.OPENPOSE_FULL: "openpose_full",
        ControlNetPreprocessor.MEDIAPIPE_FACE: "mediapipe_face",
        ControlNetPreprocessor.NORMAL_BAE: "normal_bae",
        ControlNetPreprocessor.SEGMENTATION: "seg",
        ControlNetPreprocessor.SHUFFLE: "shuffle",
        ControlNetPreprocessor.TILE: "tile",
        ControlNetPreprocessor.INPAINT: "inpaint",
        ControlNetPreprocessor.MLSD: "mlsd",
        ControlNetPreprocessor.SCRIBBLE: "scribble",
        ControlNetPreprocessor.REMBG: "rembg",
        ControlNetPreprocessor.NONE: "none",
    },
}


def initialize(registry: Optional[EnumStringRegistry] = None) -> EnumStringRegistry:
    """Register the generation enums. Idempotent and order-independent."""
    registry = registry or get_registry()
    for enum_type, mapping in WIRE_STRINGS.items():
        registry.register_many(enum_type, mapping)
    return registry
