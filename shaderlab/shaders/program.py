# shaderlab/shaders/program.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import moderngl
import numpy as np

from shaderlab.core.events import PropertyChanged
from shaderlab.core.recycle import RecycleBin
from shaderlab.core.settings import DEFAULT_SETTINGS, ShaderSettings
from shaderlab.shaders.compiler import ShaderCompiler
from shaderlab.shaders.diagnostics import CompileDiagnostic
from shaderlab.shaders.macros import MacroResolver
from shaderlab.shaders.scanner import declared_outputs
from shaderlab.shaders.source import ShaderSource
from shaderlab.shaders.stage import ShaderStageKind
from shaderlab.shaders.types import AttributeDescriptor, UniformDescriptor

log = logging.getLogger(__name__)

_LINK_KEYWORDS: Dict[ShaderStageKind, str] = {
    ShaderStageKind.FRAGMENT: "fragment_shader",
    ShaderStageKind.GEOMETRY: "geometry_shader",
    ShaderStageKind.TESSELLATION_CONTROL: "tess_control_shader",
    ShaderStageKind.TESSELLATION_EVAL: "tess_evaluation_shader",
}


def _uniform_dtype(declared_type: str) -> str:
    if declared_type.startswith(("uint", "uvec")):
        return "u4"
    if declared_type.startswith(
        ("int", "ivec", "bool", "bvec", "sampler", "isampler", "usampler")
    ):
        return "i4"
    if declared_type.startswith(("double", "dvec", "dmat")):
        return "f8"
    return "f4"


class ShaderProgramModel:
    """
    One ShaderSource per pipeline stage plus the linked program built from
    them.

    Stages are compiled individually through the ShaderCompiler so that each
    diagnostic points at its stage. The program that actually renders is then
    linked with moderngl. Replaced programs and shader handles go to the
    recycle bin.
    """

    def __init__(
        self,
        ctx: Optional[moderngl.Context],
        compiler: Optional[ShaderCompiler],
        *,
        resolver: Optional[MacroResolver] = None,
        recycle_bin: Optional[RecycleBin] = None,
        settings: ShaderSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.ctx = ctx
        self.recycle_bin = recycle_bin if recycle_bin is not None else RecycleBin()
        self._shaders: Dict[ShaderStageKind, ShaderSource] = {}
        for kind in ShaderStageKind:
            shader = ShaderSource(
                kind,
                compiler,
                resolver=resolver,
                recycle_bin=self.recycle_bin,
                settings=settings,
            )
            shader.subscribe(self._on_shader_changed)
            self._shaders[kind] = shader

        self._program: Optional[moderngl.Program] = None
        self._link_errors: List[CompileDiagnostic] = []

    @property
    def program(self) -> Optional[moderngl.Program]:
        return self._program

    def shader(self, kind: ShaderStageKind) -> ShaderSource:
        return self._shaders[kind]

    def get_code(self, kind: ShaderStageKind) -> str:
        return self._shaders[kind].code

    def set_code(self, kind: ShaderStageKind, code: str) -> None:
        self._shaders[kind].code = code

    def _on_shader_changed(self, event: PropertyChanged) -> None:
        if event.property_name == "handle":
            self._drop_program()

    def _drop_program(self) -> None:
        if self._program is not None:
            self.recycle_bin.enqueue_program(self._program)
            self._program = None

    # --- Compilation ---

    def compile_program(self) -> bool:
        """
        Compile every stage, then link. Returns False if any stage or the
        link failed; see all_compile_errors().
        """
        self._link_errors.clear()

        compiled = True
        for shader in self._shaders.values():
            if not shader.compile():
                compiled = False
        if not compiled:
            return False

        if self._program is not None or self.ctx is None:
            return True

        return self._link()

    def _link(self) -> bool:
        vertex = self._shaders[ShaderStageKind.VERTEX]
        feedback = None
        if not vertex.code.strip():
            vertex = self._shaders[ShaderStageKind.TRANSFORM_FEEDBACK_VERTEX]
            feedback = vertex
        if not vertex.code.strip():
            # Nothing to run yet.
            return True

        kwargs: Dict[str, Any] = {"vertex_shader": vertex.compiled_source}
        for kind, keyword in _LINK_KEYWORDS.items():
            source = self._shaders[kind].compiled_source
            if source:
                kwargs[keyword] = source
        if feedback is not None:
            kwargs["varyings"] = declared_outputs(feedback.code)

        try:
            program = self.ctx.program(**kwargs)
        except moderngl.Error as e:
            for line in str(e).split("\n"):
                if line.strip():
                    self._link_errors.append(
                        CompileDiagnostic.from_log_line(line, None)
                    )
            log.warning(
                "Program link failed (%d diagnostic(s))", len(self._link_errors)
            )
            return False

        self._program = program
        log.debug("Program linked")
        return True

    def all_compile_errors(self) -> List[CompileDiagnostic]:
        errors: List[CompileDiagnostic] = []
        for shader in self._shaders.values():
            errors.extend(shader.compile_errors)
        errors.extend(self._link_errors)
        return errors

    def compile_errors_for(self, kind: ShaderStageKind) -> List[CompileDiagnostic]:
        """Diagnostics produced by a single stage, for marking its editor."""
        return [
            error
            for error in self.all_compile_errors()
            if error.shader is not None and error.shader.stage == kind
        ]

    # --- Interface ---

    def uniforms(self) -> List[UniformDescriptor]:
        merged: Dict[str, UniformDescriptor] = {}
        for shader in self._shaders.values():
            for uniform in shader.get_uniforms():
                merged.setdefault(uniform.name, uniform)
        return list(merged.values())

    def attributes(self) -> List[AttributeDescriptor]:
        merged: Dict[str, AttributeDescriptor] = {}
        for shader in self._shaders.values():
            for attribute in shader.get_vertex_attributes():
                merged.setdefault(attribute.name, attribute)
        return list(merged.values())

    def set_uniform(self, name: str, value: Any) -> bool:
        """
        Write a uniform on the linked program. Returns False when there is no
        program or the program does not expose `name` (unused uniforms are
        optimized away by the driver).
        """
        program = self._program
        if program is None or name not in program:
            return False

        member = program[name]
        if not isinstance(member, moderngl.Uniform):
            return False

        if isinstance(value, np.ndarray):
            declared = next((u for u in self.uniforms() if u.name == name), None)
            dtype = _uniform_dtype(declared.declared_type) if declared else "f4"
            if value.ndim == 2:
                # numpy is row-major, GLSL matrices are column-major.
                value = value.T
            member.write(np.ascontiguousarray(value, dtype=dtype).tobytes())
        elif isinstance(value, bytes):
            member.write(value)
        else:
            member.value = value
        return True

    # --- WebGL ---

    def to_webgl1(self) -> Tuple[str, str]:
        """(vertex, fragment) sources converted to WebGL 1.0."""
        return (
            self._shaders[ShaderStageKind.VERTEX].to_webgl1(),
            self._shaders[ShaderStageKind.FRAGMENT].to_webgl1(),
        )

    def release(self) -> None:
        """Queue every handle and the program for deletion."""
        for shader in self._shaders.values():
            shader.reset()
        self._drop_program()
