# shaderlab/shaders/gl_compiler.py
from OpenGL import GL

from shaderlab.shaders.compiler import ShaderCompiler


class OpenGLCompiler(ShaderCompiler):
    """
    ShaderCompiler backed by PyOpenGL.

    Requires a current OpenGL context, e.g. one created with
    moderngl.create_context() or by the host window.
    """

    def create_shader_object(self, stage_token: int) -> int:
        return int(GL.glCreateShader(stage_token))

    def set_source(self, handle: int, source: str) -> None:
        GL.glShaderSource(handle, source)

    def compile(self, handle: int) -> bool:
        GL.glCompileShader(handle)
        return GL.glGetShaderiv(handle, GL.GL_COMPILE_STATUS) == GL.GL_TRUE

    def get_info_log(self, handle: int) -> str:
        log = GL.glGetShaderInfoLog(handle)
        if isinstance(log, bytes):
            return log.decode("utf-8", errors="replace")
        return log or ""

    def delete_object(self, handle: int) -> None:
        GL.glDeleteShader(handle)
