# shaderlab/core/settings.py
from dataclasses import dataclass, field
from typing import Tuple


@dataclass(slots=True)
class ShaderSettings:
    """
    Resource: Dialect keywords and collaborator configuration shared by
    compilation and transpilation.
    """

    # Compilation runs the macro resolver only when this directive is present.
    macro_marker: str = "#pragma glslify:"
    # Transpiled output still mentioning this token is resolved once more.
    transpile_macro_token: str = "glslify"

    vertex_id_builtin: str = "gl_VertexID"
    vertex_id_attribute: str = "_vertex_id"
    fragment_sink: str = "gl_FragColor"

    glslify_command: Tuple[str, ...] = field(default_factory=lambda: ("glslify",))


DEFAULT_SETTINGS = ShaderSettings()
