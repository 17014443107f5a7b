# shaderlab/shaders/stage.py
from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import Dict, Optional

# GL shader-type enums, kept numeric so the core never imports a GL binding.
GL_FRAGMENT_SHADER = 0x8B30
GL_VERTEX_SHADER = 0x8B31
GL_GEOMETRY_SHADER = 0x8DD9
GL_TESS_EVALUATION_SHADER = 0x8E87
GL_TESS_CONTROL_SHADER = 0x8E88


class ShaderStageKind(IntEnum):
    TRANSFORM_FEEDBACK_VERTEX = 0
    VERTEX = 1
    GEOMETRY = 2
    TESSELLATION_CONTROL = 3
    TESSELLATION_EVAL = 4
    FRAGMENT = 5

    @property
    def gl_token(self) -> int:
        """Stage-type token handed to the compiler service."""
        return _GL_TOKENS[self]

    @property
    def title(self) -> str:
        return _TITLES[self]

    @property
    def transpilable(self) -> bool:
        """Only vertex and fragment stages exist in WebGL 1.0."""
        return self in (ShaderStageKind.VERTEX, ShaderStageKind.FRAGMENT)

    @classmethod
    def from_name(cls, name: str) -> ShaderStageKind:
        key = name.strip().lower().replace("-", "_")
        if key in _ALIASES:
            return _ALIASES[key]
        return cls[key.upper()]

    @classmethod
    def from_path(cls, path: str | Path) -> Optional[ShaderStageKind]:
        """Guess the stage from a conventional file extension."""
        return _EXTENSIONS.get(Path(path).suffix.lower())


_GL_TOKENS: Dict[ShaderStageKind, int] = {
    ShaderStageKind.TRANSFORM_FEEDBACK_VERTEX: GL_VERTEX_SHADER,
    ShaderStageKind.VERTEX: GL_VERTEX_SHADER,
    ShaderStageKind.GEOMETRY: GL_GEOMETRY_SHADER,
    ShaderStageKind.TESSELLATION_CONTROL: GL_TESS_CONTROL_SHADER,
    ShaderStageKind.TESSELLATION_EVAL: GL_TESS_EVALUATION_SHADER,
    ShaderStageKind.FRAGMENT: GL_FRAGMENT_SHADER,
}

_TITLES: Dict[ShaderStageKind, str] = {
    ShaderStageKind.TRANSFORM_FEEDBACK_VERTEX: "Transform Feedback Vertex",
    ShaderStageKind.VERTEX: "Vertex",
    ShaderStageKind.GEOMETRY: "Geometry",
    ShaderStageKind.TESSELLATION_CONTROL: "Tessellation Ctrl",
    ShaderStageKind.TESSELLATION_EVAL: "Tessellation Eval",
    ShaderStageKind.FRAGMENT: "Fragment",
}

_ALIASES: Dict[str, ShaderStageKind] = {
    "vert": ShaderStageKind.VERTEX,
    "frag": ShaderStageKind.FRAGMENT,
    "geom": ShaderStageKind.GEOMETRY,
    "tesc": ShaderStageKind.TESSELLATION_CONTROL,
    "tese": ShaderStageKind.TESSELLATION_EVAL,
}

_EXTENSIONS: Dict[str, ShaderStageKind] = {
    ".vert": ShaderStageKind.VERTEX,
    ".vs": ShaderStageKind.VERTEX,
    ".frag": ShaderStageKind.FRAGMENT,
    ".fs": ShaderStageKind.FRAGMENT,
    ".geom": ShaderStageKind.GEOMETRY,
    ".tesc": ShaderStageKind.TESSELLATION_CONTROL,
    ".tese": ShaderStageKind.TESSELLATION_EVAL,
}
