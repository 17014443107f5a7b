from typing import Dict, List

import pytest

from shaderlab.core.errors import MacroExpansionError
from shaderlab.core.recycle import RecycleBin
from shaderlab.shaders.compiler import ShaderCompiler
from shaderlab.shaders.macros import MacroResolver

MESH_VERTEX_SHADER = """#version 330

layout(location = 0) in vec3 _meshVertex;
layout(location = 1) in vec3 _meshNormal;

uniform mat4 _worldToClip;
out vec3 normal;

void main() {
  normal = _meshNormal;
  gl_Position = _worldToClip * vec4(_meshVertex , 1.0);
}
"""

MESH_FRAGMENT_SHADER = """#version 330

uniform vec3 _lightDirection[4];
uniform mat3 _worldToCameraNormal;

in  vec3 normal;
out vec4 fragment_color;

void main() {
  vec3 l = normalize(_lightDirection[0]);
  vec3 camNormal = _worldToCameraNormal * normal;
  float intensity = dot(l, normalize(camNormal.xyz));
  vec4 diffuse = vec4(1.0, 0.0, 1.0, 1.0);

  vec3 ambient = vec3(0.1, 0.1, 0.1) * diffuse.rgb;
  vec3 c = ambient + diffuse.rgb * abs(intensity);
  fragment_color = vec4(c, diffuse.a);
}
"""


class FakeCompiler(ShaderCompiler):
    """Records calls instead of talking to a GL driver."""

    def __init__(self, info_log: str = "") -> None:
        # A non-empty info log makes every compile fail.
        self.info_log = info_log
        self.next_handle = 1
        self.tokens: Dict[int, int] = {}
        self.sources: Dict[int, str] = {}
        self.compiled: List[int] = []
        self.deleted: List[int] = []

    def create_shader_object(self, stage_token: int) -> int:
        handle = self.next_handle
        self.next_handle += 1
        self.tokens[handle] = stage_token
        return handle

    def set_source(self, handle: int, source: str) -> None:
        self.sources[handle] = source

    def compile(self, handle: int) -> bool:
        self.compiled.append(handle)
        return not self.info_log

    def get_info_log(self, handle: int) -> str:
        return self.info_log

    def delete_object(self, handle: int) -> None:
        self.deleted.append(handle)


class FakeResolver(MacroResolver):
    def __init__(self, replacement: str = "", error: str = "") -> None:
        self.replacement = replacement
        self.error = error
        self.calls: List[str] = []

    def expand(self, source: str) -> str:
        self.calls.append(source)
        if self.error:
            raise MacroExpansionError(self.error)
        return self.replacement


@pytest.fixture
def compiler():
    return FakeCompiler()


@pytest.fixture
def failing_compiler():
    return FakeCompiler(
        info_log=(
            "0(7) : error C1008: undefined variable \"nrm\"\n"
            "\n"
            "0(9) : error C0000: syntax error, unexpected '}'\n"
        )
    )


@pytest.fixture
def recycle_bin():
    return RecycleBin()


@pytest.fixture
def make_resolver():
    return FakeResolver


@pytest.fixture
def vertex_code():
    return MESH_VERTEX_SHADER


@pytest.fixture
def fragment_code():
    return MESH_FRAGMENT_SHADER
