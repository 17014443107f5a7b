import pytest

from shaderlab.core.errors import InvalidShaderOperation, MacroExpansionError
from shaderlab.shaders.source import ShaderSource
from shaderlab.shaders.stage import ShaderStageKind
from shaderlab.shaders.transpiler import transpile

EXPECTED_VERTEX = """attribute vec3 _meshVertex;
attribute vec3 _meshNormal;
uniform mat4 _worldToClip;


varying vec3 normal;

void main() {
  normal = _meshNormal;
  gl_Position = _worldToClip * vec4(_meshVertex , 1.0);
}"""


def test_vertex_shader(vertex_code):
    shader = ShaderSource(ShaderStageKind.VERTEX, code=vertex_code)
    assert shader.to_webgl1() == EXPECTED_VERTEX


def test_vertex_shader_drops_modern_declarations(vertex_code):
    text = transpile(vertex_code, ShaderStageKind.VERTEX)
    assert "#version" not in text
    assert "layout" not in text
    assert "out vec3" not in text
    assert text.count("uniform mat4 _worldToClip;") == 1


def test_fragment_shader(fragment_code):
    text = ShaderSource(ShaderStageKind.FRAGMENT, code=fragment_code).to_webgl1()
    lines = text.split("\n")

    assert lines[:2] == [
        "uniform vec3 _lightDirection[4];",
        "uniform mat3 _worldToCameraNormal;",
    ]
    assert "varying  vec3 normal;" in lines
    assert "  gl_FragColor = vec4(c, diffuse.a);" in lines
    assert "fragment_color" not in text
    assert "  vec3 l = normalize(_lightDirection[0]);" in lines
    assert lines[-1] == "}"


def test_fragment_output_rewrite_is_whole_token():
    code = "\n".join(
        [
            "#version 330",
            "out vec4 fragment_color;",
            "uniform vec4 fragment_color2;",
            "void main() {",
            "  vec4 fragment_color_base = fragment_color2;",
            "  fragment_color = fragment_color_base;",
            "  fragment_color.a = 1.0;",
            "}",
        ]
    )
    text = transpile(code, ShaderStageKind.FRAGMENT)
    assert text.split("\n") == [
        "uniform vec4 fragment_color2;",
        "void main() {",
        "  vec4 fragment_color_base = fragment_color2;",
        "  gl_FragColor = fragment_color_base;",
        "  gl_FragColor.a = 1.0;",
        "}",
    ]


def test_fragment_layout_output_is_rewritten():
    code = "layout(location = 0) out vec4 color;\nvoid main() { color = vec4(1.0); }"
    text = transpile(code, ShaderStageKind.FRAGMENT)
    assert text == "void main() { gl_FragColor = vec4(1.0); }"


def test_vertex_layout_output_becomes_varying():
    code = "layout(location = 2) out vec2 uv;\nvoid main() {}"
    assert transpile(code, ShaderStageKind.VERTEX) == "varying vec2 uv;\nvoid main() {}"


def test_fragment_output_with_trailing_comment():
    code = "out vec4 color; // rgba result\nvoid main() {\n  color = vec4(1.0);\n}"
    text = transpile(code, ShaderStageKind.FRAGMENT)
    assert text == "void main() {\n  gl_FragColor = vec4(1.0);\n}"


def test_fragment_output_with_precision_qualifier():
    code = "out highp vec4 color; /* final */\nvoid main() { color = vec4(0.0); }"
    text = transpile(code, ShaderStageKind.FRAGMENT)
    assert text == "void main() { gl_FragColor = vec4(0.0); }"


def test_interpolation_qualified_layout_output():
    code = "layout(location = 0) flat out int id;\nvoid main() { id = 1; }"
    assert transpile(code, ShaderStageKind.VERTEX) == "varying int id;\nvoid main() { id = 1; }"


def test_interpolation_qualified_input():
    code = "smooth in vec2 uv;\nvoid main() {}"
    assert transpile(code, ShaderStageKind.FRAGMENT) == "varying vec2 uv;\nvoid main() {}"


def test_commented_out_uniform_is_not_emitted():
    code = "/*\nuniform sampler2D unused;\n*/\nvoid main() {}"
    text = transpile(code, ShaderStageKind.VERTEX)
    assert text.startswith("/*")
    assert text.count("uniform sampler2D unused;") == 1


def test_multiple_fragment_outputs_are_rejected():
    code = "out vec4 color;\nout vec4 normal;\nvoid main() {}"
    with pytest.raises(InvalidShaderOperation):
        transpile(code, ShaderStageKind.FRAGMENT)


@pytest.mark.parametrize(
    "stage",
    [
        ShaderStageKind.GEOMETRY,
        ShaderStageKind.TESSELLATION_CONTROL,
        ShaderStageKind.TESSELLATION_EVAL,
        ShaderStageKind.TRANSFORM_FEEDBACK_VERTEX,
    ],
)
def test_other_stages_cannot_be_converted(stage, vertex_code):
    shader = ShaderSource(stage, code=vertex_code)
    with pytest.raises(InvalidShaderOperation):
        shader.to_webgl1()


def test_vertex_id_becomes_attribute():
    code = "\n".join(
        [
            "#version 330",
            "uniform int count;",
            "void main() {",
            "  float t = float(gl_VertexID) / float(count);",
            "  gl_Position = vec4(t, gl_VertexID, 0.0, 1.0);",
            "}",
        ]
    )
    text = transpile(code, ShaderStageKind.VERTEX)
    assert text.count("attribute float _vertex_id;") == 1
    assert "gl_VertexID" not in text
    assert "  float t = float(_vertex_id) / float(count);" in text
    assert text.startswith("attribute float _vertex_id;\nuniform float count;")


def test_integer_types_widen_to_float():
    code = "layout(location = 0) in int _meshIndex;\nuniform int mode;\nvoid main() {}"
    assert transpile(code, ShaderStageKind.VERTEX).split("\n")[:2] == [
        "attribute float _meshIndex;",
        "uniform float mode;",
    ]


def test_legacy_attributes_are_reemitted_once():
    code = "attribute vec3 position;\nvoid main() {}"
    text = transpile(code, ShaderStageKind.VERTEX)
    assert text == "attribute vec3 position;\nvoid main() {}"


def test_inputs_become_varying_with_indent_kept():
    code = "  in vec3 normal;\nvoid main() { int index = 0; }"
    text = transpile(code, ShaderStageKind.FRAGMENT)
    assert text == "  varying vec3 normal;\nvoid main() { int index = 0; }"


def test_comments_and_blank_lines_pass_through():
    code = "\n".join(
        [
            "// header",
            "/* block",
            "uniform float hidden;",
            "*/",
            "",
            "/* one line */",
            "void main() {}   ",
        ]
    )
    text = transpile(code, ShaderStageKind.VERTEX)
    # The commented-out uniform is not re-emitted as a live declaration.
    assert text.split("\n") == [
        "// header",
        "/* block",
        "uniform float hidden;",
        "*/",
        "",
        "/* one line */",
        "void main() {}",
    ]


def test_macro_token_in_output_is_resolved(make_resolver):
    resolver = make_resolver(replacement="resolved")
    code = "// uses glslify\nvoid main() {}"
    assert transpile(code, ShaderStageKind.VERTEX, resolver=resolver) == "resolved"
    assert resolver.calls == [code]


def test_macro_token_without_resolver_fails():
    with pytest.raises(MacroExpansionError):
        transpile("// glslify\nvoid main() {}", ShaderStageKind.VERTEX)
