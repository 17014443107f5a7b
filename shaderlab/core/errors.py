# shaderlab/core/errors.py


class ShaderLabError(Exception):
    """Base class for errors raised by shaderlab."""


class InvalidShaderOperation(ShaderLabError, RuntimeError):
    """
    Raised when an operation is requested on a shader that cannot support it,
    e.g. converting a geometry stage to WebGL 1.0.
    """


class MacroExpansionError(ShaderLabError):
    """Raised by a macro resolver when it cannot expand shader source."""
