# shaderlab/shaders/diagnostics.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from shaderlab.shaders.source import ShaderSource

# "0(12) : error C0000: ..."   (NVIDIA)
# "ERROR: 0:12: ..." or "0:12(5): error: ..."   (AMD, Intel, Mesa)
_LINE_PATTERNS = (
    re.compile(r"^\s*\d+\((\d+)\)"),
    re.compile(r"^\s*(?:ERROR|WARNING|error|warning)?:?\s*\d+:(\d+)[:(]"),
)


def parse_line_number(message: str) -> int:
    """Source line a driver message refers to, or 0 when it names none."""
    for pattern in _LINE_PATTERNS:
        match = pattern.match(message)
        if match:
            return int(match.group(1))
    return 0


@dataclass(frozen=True)
class CompileDiagnostic:
    """
    One line of compiler output tied to the shader stage that produced it.

    `shader` is None for diagnostics that belong to the linked program rather
    than a single stage. Equality compares the shader by identity.
    """

    message: str
    shader: Optional["ShaderSource"] = field(default=None, repr=False)
    line_number: int = 0

    @classmethod
    def from_log_line(
        cls, line: str, shader: Optional["ShaderSource"]
    ) -> CompileDiagnostic:
        message = line.rstrip()
        return cls(
            message=message, shader=shader, line_number=parse_line_number(message)
        )
