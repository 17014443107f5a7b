# shaderlab/shaders/source.py
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from shaderlab.core.errors import InvalidShaderOperation, MacroExpansionError
from shaderlab.core.events import EventManager, Listener, PropertyChanged
from shaderlab.core.recycle import RecycleBin
from shaderlab.core.settings import DEFAULT_SETTINGS, ShaderSettings
from shaderlab.shaders.compiler import ShaderCompiler
from shaderlab.shaders.diagnostics import CompileDiagnostic
from shaderlab.shaders.macros import MacroResolver
from shaderlab.shaders.scanner import scan
from shaderlab.shaders.stage import ShaderStageKind
from shaderlab.shaders.transpiler import to_legacy_dialect
from shaderlab.shaders.types import AttributeDescriptor, ScanResult, UniformDescriptor

log = logging.getLogger(__name__)


class ShaderSource:
    """
    A single GLSL stage of a program.

    Owns the stage's source text and its compiled handle (0 when not
    compiled). Replacing the code drops the handle, the diagnostics and the
    cached uniform/attribute scan. Replaced handles are never deleted here;
    they are queued on the recycle bin for the host to drain.

    Observers are notified with PropertyChanged("code" | "handle").
    """

    def __init__(
        self,
        stage: ShaderStageKind,
        compiler: Optional[ShaderCompiler] = None,
        *,
        resolver: Optional[MacroResolver] = None,
        recycle_bin: Optional[RecycleBin] = None,
        settings: ShaderSettings = DEFAULT_SETTINGS,
        code: str = "",
    ) -> None:
        self._stage = stage
        self.compiler = compiler
        self.resolver = resolver
        self.recycle_bin = recycle_bin if recycle_bin is not None else RecycleBin()
        self.settings = settings
        self.events = EventManager()

        self._code = code
        self._handle = 0
        self._compiled_source = ""
        self._diagnostics: List[CompileDiagnostic] = []
        # Result of the last compile() for the current code/handle, None if
        # no attempt has been made yet.
        self._compile_state: Optional[bool] = None
        # (source text the scan was taken from, scan result)
        self._scan_cache: Optional[Tuple[str, ScanResult]] = None

    def __repr__(self) -> str:
        return f"ShaderSource({self._stage.name}, handle={self._handle})"

    @property
    def stage(self) -> ShaderStageKind:
        return self._stage

    @property
    def code(self) -> str:
        return self._code

    @code.setter
    def code(self, value: str) -> None:
        if value == self._code:
            return
        self._code = value
        self._scan_cache = None
        self._diagnostics.clear()
        self.handle = 0
        self._compile_state = None
        self._notify("code")

    @property
    def handle(self) -> int:
        return self._handle

    @handle.setter
    def handle(self, value: int) -> None:
        if value == 0:
            self._compile_state = None
            self._compiled_source = ""
        if value == self._handle:
            return
        self.recycle_bin.enqueue(self._handle)
        self._handle = value
        # A new program object may bind locations differently.
        self._scan_cache = None
        self._notify("handle")

    @property
    def compiled_source(self) -> str:
        """Text handed to the compiler, after macro expansion. Empty until compiled."""
        return self._compiled_source

    @property
    def compile_errors(self) -> List[CompileDiagnostic]:
        return list(self._diagnostics)

    def reset(self) -> None:
        """Forget the compiled handle so the next compile() runs again."""
        self.handle = 0
        self._diagnostics.clear()

    # --- Change notification ---

    def subscribe(self, listener: Listener) -> None:
        self.events.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self.events.unsubscribe(listener)

    def _notify(self, property_name: str) -> None:
        self.events.emit(PropertyChanged(sender=self, property_name=property_name))

    # --- Interface scan ---

    def interface(self) -> ScanResult:
        code = self._code
        if self._scan_cache is None or self._scan_cache[0] != code:
            self._scan_cache = (code, scan(code))
        return self._scan_cache[1]

    def get_uniforms(self) -> List[UniformDescriptor]:
        return list(self.interface().uniforms)

    def get_vertex_attributes(self) -> List[AttributeDescriptor]:
        return list(self.interface().attributes)

    # --- Compilation ---

    def compile(self) -> bool:
        """
        Compile the current code. Returns the recorded result when the code
        has already been compiled; failures are reported via compile_errors.
        """
        if self._handle != 0:
            return not self._diagnostics
        if self._compile_state is not None:
            return self._compile_state

        self._diagnostics.clear()
        self._compile_state = self._compile()
        return self._compile_state

    def _compile(self) -> bool:
        # An absent stage is fine.
        if not self._code.strip():
            return True

        if self.compiler is None:
            raise InvalidShaderOperation(f"{self!r} has no compiler attached")

        source = self._code
        if self.settings.macro_marker in source:
            try:
                source = self._expand_macros(source)
            except MacroExpansionError as e:
                self._add_log(str(e) or type(e).__name__)
                log.warning("%s stage: macro expansion failed", self._stage.title)
                return False

        if not source.strip():
            self._add_log("Macro expansion produced no source")
            return False

        compiler = self.compiler
        handle = compiler.create_shader_object(self._stage.gl_token)
        try:
            compiler.set_source(handle, source)
            compiled = compiler.compile(handle)
            if not compiled:
                self._add_log(compiler.get_info_log(handle))
        except Exception:
            compiler.delete_object(handle)
            raise

        if not compiled:
            # Never stored, so it is released now rather than recycled.
            compiler.delete_object(handle)
            log.warning(
                "%s stage failed to compile (%d diagnostic(s))",
                self._stage.title,
                len(self._diagnostics),
            )
            return False

        self.handle = handle
        self._compiled_source = source
        log.debug("%s stage compiled (handle %d)", self._stage.title, handle)
        return True

    def _expand_macros(self, source: str) -> str:
        if self.resolver is None:
            raise MacroExpansionError("No macro resolver configured")
        return self.resolver.expand(source)

    def _add_log(self, text: str) -> None:
        for line in text.split("\n"):
            if line.strip():
                self._diagnostics.append(CompileDiagnostic.from_log_line(line, self))

    # --- WebGL ---

    def to_webgl1(self) -> str:
        """WebGL 1.0 version of this stage. Vertex and fragment stages only."""
        return to_legacy_dialect(self)
