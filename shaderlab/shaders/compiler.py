# shaderlab/shaders/compiler.py
from abc import ABC, abstractmethod


class ShaderCompiler(ABC):
    """
    Compiles single shader stages.

    Handles are opaque non-zero integers. Implementations talk to a graphics
    API and must be called on the thread that owns its context.
    """

    @abstractmethod
    def create_shader_object(self, stage_token: int) -> int:
        pass

    @abstractmethod
    def set_source(self, handle: int, source: str) -> None:
        pass

    @abstractmethod
    def compile(self, handle: int) -> bool:
        pass

    @abstractmethod
    def get_info_log(self, handle: int) -> str:
        pass

    @abstractmethod
    def delete_object(self, handle: int) -> None:
        pass
