from shaderlab.shaders.compiler import ShaderCompiler
from shaderlab.shaders.diagnostics import CompileDiagnostic
from shaderlab.shaders.macros import GlslifyResolver, MacroResolver
from shaderlab.shaders.program import ShaderProgramModel
from shaderlab.shaders.scanner import scan
from shaderlab.shaders.source import ShaderSource
from shaderlab.shaders.stage import ShaderStageKind
from shaderlab.shaders.transpiler import to_legacy_dialect, transpile
from shaderlab.shaders.types import AttributeDescriptor, ScanResult, UniformDescriptor

__all__ = [
    "ShaderSource",
    "ShaderStageKind",
    "ShaderProgramModel",
    "ShaderCompiler",
    "MacroResolver",
    "GlslifyResolver",
    "CompileDiagnostic",
    "UniformDescriptor",
    "AttributeDescriptor",
    "ScanResult",
    "scan",
    "transpile",
    "to_legacy_dialect",
]
