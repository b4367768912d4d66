"""
Enum String Registry - bidirectional enum <-> wire string table.

Each feature area registers its enums once at startup through an
idempotent initialize() function. Registration order does not matter and
repeating an identical mapping is a no-op. A conflicting mapping raises
DuplicateMappingConflict immediately.

Concurrency:
- Writes are serialized by a lock.
- Tables are copy-on-write: a write builds new dicts and swaps the
  reference, so readers never lock and never observe a half-applied update.

Usage:
    from civitai_client.kernel.registry import get_registry

    registry = get_registry()
    registry.register(ModelType, ModelType.LORA, "LORA")
    registry.to_wire(ModelType, ModelType.LORA)      # "LORA"
    registry.from_wire(ModelType, "lora")            # ModelType.LORA
"""

import threading
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Type, TypeVar

from civitai_client.kernel.errors import (
    DuplicateMappingConflict,
    UnknownWireValue,
    UnmappedVariant,
)
from civitai_client.logging_config import get_logger

logger = get_logger(__name__)

E = TypeVar("E", bound=Enum)

# Per-type tables: forward, exact reverse, case-folded reverse
_Tables = Tuple[Dict[Enum, str], Dict[str, Enum], Dict[str, Enum]]


class EnumStringRegistry:
    """Process-wide enum/wire-string table. Construct through get_registry()."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tables: Dict[type, _Tables] = {}

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def register(self, enum_type: Type[E], variant: E, wire: str) -> None:
        """Insert one bidirectional pair; identical re-registration is a no-op."""
        self.register_many(enum_type, {variant: wire})

    def register_many(self, enum_type: Type[E], mapping: Mapping[E, str]) -> None:
        """Insert several pairs for one enum type atomically.

        Either every pair is applied or, on conflict, none is.
        """
        for variant, wire in mapping.items():
            if not isinstance(variant, enum_type):
                raise TypeError(f"{variant!r} is not a member of {enum_type.__name__}")
            if not isinstance(wire, str) or not wire.strip():
                raise ValueError(f"Wire string for {enum_type.__name__}.{variant.name} must be non-empty")

        with self._lock:
            forward, reverse, folded = self._tables.get(enum_type, ({}, {}, {}))
            forward, reverse, folded = dict(forward), dict(reverse), dict(folded)

            for variant, wire in mapping.items():
                existing = forward.get(variant)
                if existing is not None:
                    if existing != wire:
                        logger.error(
                            "Conflicting wire string for %s.%s: %r vs %r",
                            enum_type.__name__, variant.name, existing, wire,
                        )
                        raise DuplicateMappingConflict(
                            f"{enum_type.__name__}.{variant.name} is already mapped to "
                            f"{existing!r}; refusing to remap to {wire!r}",
                            field=enum_type.__name__,
                            value=wire,
                        )
                    continue

                owner = reverse.get(wire)
                if owner is not None and owner is not variant:
                    logger.error(
                        "Wire string %r for %s already owned by %s",
                        wire, enum_type.__name__, owner.name,
                    )
                    raise DuplicateMappingConflict(
                        f"Wire string {wire!r} of {enum_type.__name__} already belongs to "
                        f"{owner.name}; cannot also map {variant.name}",
                        field=enum_type.__name__,
                        value=wire,
                    )

                forward[variant] = wire
                reverse[wire] = variant
                # First registration wins for case-insensitive fallback
                folded.setdefault(wire.casefold(), variant)

            tables = dict(self._tables)
            tables[enum_type] = (forward, reverse, folded)
            self._tables = tables

    def clear(self) -> None:
        """Drop every mapping. Teardown hook for tests and re-initialization."""
        with self._lock:
            self._tables = {}

    # ------------------------------------------------------------------
    # Reads (lock-free)
    # ------------------------------------------------------------------

    def to_wire(self, enum_type: Type[E], variant: E) -> str:
        """Wire string for a variant. Raises UnmappedVariant when absent."""
        tables = self._tables.get(enum_type)
        wire = tables[0].get(variant) if tables else None
        if wire is None:
            name = getattr(variant, "name", repr(variant))
            raise UnmappedVariant(
                f"No wire string registered for {enum_type.__name__}.{name}",
                field=enum_type.__name__,
                value=variant,
            )
        return wire

    def from_wire(self, enum_type: Type[E], wire: str) -> E:
        """Variant for a wire string, exact match first then case-insensitive.

        Raises UnknownWireValue when nothing matches.
        """
        tables = self._tables.get(enum_type)
        if tables and isinstance(wire, str):
            _, reverse, folded = tables
            variant = reverse.get(wire)
            if variant is None:
                variant = folded.get(wire.casefold())
            if variant is not None:
                return variant  # type: ignore[return-value]
        raise UnknownWireValue(
            f"{wire!r} is not a known {enum_type.__name__} value",
            field=enum_type.__name__,
            value=wire,
        )

    def is_registered(self, enum_type: type) -> bool:
        return enum_type in self._tables

    def mappings(self, enum_type: Type[E]) -> Mapping[E, str]:
        """Read-only snapshot of the forward table for one type."""
        tables = self._tables.get(enum_type)
        return MappingProxyType(dict(tables[0]) if tables else {})


_registry: Optional[EnumStringRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> EnumStringRegistry:
    """Process-wide registry instance (created on first use, exactly once)."""
    global _registry
    registry = _registry
    if registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = EnumStringRegistry()
            registry = _registry
    return registry


def reset_registry() -> None:
    """Discard the process registry; the next get_registry() builds a fresh one.

    Feature modules re-populate on their next initialize() call.
    """
    global _registry
    with _registry_lock:
        _registry = None
