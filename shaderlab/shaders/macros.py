# shaderlab/shaders/macros.py
import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Sequence

from shaderlab.core.errors import MacroExpansionError
from shaderlab.core.settings import DEFAULT_SETTINGS

log = logging.getLogger(__name__)


class MacroResolver(ABC):
    @abstractmethod
    def expand(self, source: str) -> str:
        """
        Return source with macro directives resolved.
        Raise MacroExpansionError when that is not possible.
        """
        pass


class GlslifyResolver(MacroResolver):
    """
    Resolves `#pragma glslify:` directives by piping the source through the
    glslify command-line tool (`npm install -g glslify`).
    """

    def __init__(
        self, command: Sequence[str] = DEFAULT_SETTINGS.glslify_command
    ) -> None:
        self.command = tuple(command)

    def expand(self, source: str) -> str:
        try:
            result = subprocess.run(
                self.command,
                input=source,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            log.error("Could not run %s: %s", self.command[0], e)
            raise MacroExpansionError(f"Could not run {self.command[0]}: {e}") from e

        if result.returncode != 0:
            message = result.stderr.strip() or f"{self.command[0]} failed"
            log.error("Macro expansion failed: %s", message)
            raise MacroExpansionError(message)

        return result.stdout
