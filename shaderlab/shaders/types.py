# shaderlab/shaders/types.py
from dataclasses import dataclass
from typing import List, NamedTuple, Optional


@dataclass(frozen=True)
class UniformDescriptor:
    """A `uniform` declaration recovered from shader source."""

    name: str
    declared_type: str  # e.g. "mat4", "sampler2D"
    array_length: int = 0  # 0 means not an array


@dataclass(frozen=True)
class AttributeDescriptor:
    """A per-vertex input recovered from shader source."""

    name: str
    declared_type: str
    location: Optional[int] = None  # None for the unqualified `attribute` form


class ScanResult(NamedTuple):
    uniforms: List[UniformDescriptor]
    attributes: List[AttributeDescriptor]
