# shaderlab/core/recycle.py
import logging
from queue import Queue
from typing import Any, Callable, List

log = logging.getLogger(__name__)


class RecycleBin:
    """
    Deferred deletion of GPU objects.

    Shader handles and linked programs are queued here when they are replaced
    and only destroyed when the host calls drain() on the thread that owns the
    graphics context (typically once per frame).
    """

    def __init__(self) -> None:
        self._shaders: Queue = Queue()
        self._programs: Queue = Queue()

    def enqueue(self, handle: int) -> None:
        """Queue a compiled shader handle. Zero handles are ignored."""
        if handle:
            self._shaders.put(handle)

    def enqueue_program(self, program: Any) -> None:
        """Queue a linked program object exposing release()."""
        if program is not None:
            self._programs.put(program)

    def pending(self) -> int:
        return self._shaders.qsize() + self._programs.qsize()

    def drain(self, delete_shader: Callable[[int], None]) -> List[int]:
        """
        Delete everything queued so far.

        Returns the shader handles passed to delete_shader.
        """
        deleted = []
        while not self._shaders.empty():
            handle = self._shaders.get()
            delete_shader(handle)
            deleted.append(handle)

        released = 0
        while not self._programs.empty():
            self._programs.get().release()
            released += 1

        if deleted or released:
            log.debug(
                "Recycle bin drained %d shader(s), %d program(s)",
                len(deleted),
                released,
            )
        return deleted
