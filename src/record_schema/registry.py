"""Rule and transform registries bundled for injection into validate/format."""

from __future__ import annotations

from dataclasses import dataclass, field

from .rules import RuleRegistry
from .transforms import TransformRegistry


@dataclass
class Registry:
    """A set of rules and transforms. Each new instance starts with the built-ins only."""

    rules: RuleRegistry = field(default_factory=RuleRegistry)
    transforms: TransformRegistry = field(default_factory=TransformRegistry)


# Shared process-wide instance used when no registry is passed
default_registry = Registry()
