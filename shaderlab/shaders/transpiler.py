# shaderlab/shaders/transpiler.py
"""
GLSL 3.30 core -> WebGL 1.0 (GLSL ES 1.00) conversion.

The input is expected to already compile as modern GLSL, so instead of a
parser this works line by line with a fixed set of rewrites:

- interface declarations are re-emitted from the scan as `attribute` and
  `uniform` lines, `int` widened to `float`
- `gl_VertexID` becomes a float attribute
- `in`/`out` qualifiers become `varying`, interpolation qualifiers are dropped
- the fragment stage's single `out vec4` is replaced by `gl_FragColor`
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, List, Optional

from shaderlab.core.errors import InvalidShaderOperation, MacroExpansionError
from shaderlab.core.settings import DEFAULT_SETTINGS, ShaderSettings
from shaderlab.shaders.macros import MacroResolver
from shaderlab.shaders.scanner import (
    ATTRIBUTE_KEYWORD,
    LAYOUT_KEYWORD,
    UNIFORM_KEYWORD,
    after_layout,
    declared_name,
    interface_qualifier,
    scan,
    starts_with_keyword,
)
from shaderlab.shaders.stage import ShaderStageKind
from shaderlab.shaders.types import ScanResult

if TYPE_CHECKING:
    from shaderlab.shaders.source import ShaderSource

log = logging.getLogger(__name__)

VERSION_DIRECTIVE = "#version"
LEGACY_QUALIFIER = "varying"


def _widen(declared_type: str) -> str:
    # WebGL 1.0 has no integer attributes.
    return "float" if declared_type == "int" else declared_type


def _indent(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def _trim_blank_lines(lines: List[str]) -> List[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def _header(
    interface: ScanResult, uses_vertex_id: bool, settings: ShaderSettings
) -> List[str]:
    lines = [
        f"attribute {_widen(a.declared_type)} {a.name};" for a in interface.attributes
    ]
    if uses_vertex_id:
        lines.append(f"attribute float {settings.vertex_id_attribute};")

    for uniform in interface.uniforms:
        declaration = f"uniform {_widen(uniform.declared_type)} {uniform.name}"
        if uniform.array_length > 0:
            declaration += f"[{uniform.array_length}]"
        lines.append(declaration + ";")
    return lines


def transpile(
    code: str,
    stage: ShaderStageKind,
    *,
    interface: Optional[ScanResult] = None,
    resolver: Optional[MacroResolver] = None,
    settings: ShaderSettings = DEFAULT_SETTINGS,
) -> str:
    """
    Convert modern GLSL source of a vertex or fragment stage to WebGL 1.0.

    Raises InvalidShaderOperation for any other stage, or for a fragment
    stage with more than one output (WebGL 1.0 only has gl_FragColor).
    """
    if not stage.transpilable:
        raise InvalidShaderOperation(
            f"Only vertex and fragment shaders can be converted to WebGL 1.0, "
            f"got {stage.title}"
        )

    if interface is None:
        interface = scan(code)

    body = code
    uses_vertex_id = settings.vertex_id_builtin in body
    if uses_vertex_id:
        body = body.replace(settings.vertex_id_builtin, settings.vertex_id_attribute)

    output = _header(interface, uses_vertex_id, settings)
    output.extend(_rewrite_body(body.split("\n"), stage, settings))

    result = "\n".join(_trim_blank_lines(output))
    if settings.transpile_macro_token in result:
        if resolver is None:
            raise MacroExpansionError(
                "Converted source has macro directives but no resolver is configured"
            )
        result = resolver.expand(result)
    return result


def _rewrite_body(
    lines: List[str], stage: ShaderStageKind, settings: ShaderSettings
) -> List[str]:
    output: List[str] = []
    sink: Optional[re.Pattern] = None
    in_block_comment = False
    has_output = False

    for raw_line in lines:
        line = raw_line.rstrip()
        if sink is not None:
            line = sink.sub(settings.fragment_sink, line)
        trimmed = line.strip()

        if in_block_comment:
            output.append(line)
            if "*/" in trimmed:
                in_block_comment = False
            continue

        if trimmed.startswith(VERSION_DIRECTIVE):
            continue

        if trimmed.startswith("//"):
            output.append(line)
            continue

        if trimmed.startswith("/*"):
            close = trimmed.find("*/", 2)
            if close == -1:
                in_block_comment = True
                output.append(line)
                continue
            if close + 2 == len(trimmed):
                output.append(line)
                continue

        if not trimmed:
            output.append("")
            continue

        if starts_with_keyword(trimmed, LAYOUT_KEYWORD):
            # Located inputs were re-emitted as attributes. Located outputs
            # are rewritten like plain ones below.
            qualified = after_layout(trimmed)
            if qualified is None or interface_qualifier(qualified)[0] != "out":
                continue
            trimmed = qualified
        elif starts_with_keyword(trimmed, ATTRIBUTE_KEYWORD) or starts_with_keyword(
            trimmed, UNIFORM_KEYWORD
        ):
            continue

        qualifier, declaration = interface_qualifier(trimmed)
        if qualifier == "out" and stage is ShaderStageKind.FRAGMENT:
            if has_output:
                raise InvalidShaderOperation(
                    "WebGL 1.0 fragment shaders support a single output, "
                    f"found another in: {trimmed}"
                )
            has_output = True
            name = declared_name(declaration)
            if name is None:
                log.warning("Could not find output name in %r", trimmed)
                continue
            sink = re.compile(rf"\b{re.escape(name)}\b")
            continue

        if qualifier is not None:
            line = _indent(line) + LEGACY_QUALIFIER + declaration

        output.append(line)

    return output


def to_legacy_dialect(shader: ShaderSource) -> str:
    """Convert a vertex or fragment ShaderSource to WebGL 1.0 source."""
    return transpile(
        shader.code,
        shader.stage,
        interface=shader.interface(),
        resolver=shader.resolver,
        settings=shader.settings,
    )
