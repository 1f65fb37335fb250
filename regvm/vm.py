"""Flat container of independently-run processes."""

from __future__ import annotations

import logging
import threading
from typing import TextIO

from .process import Process

logger = logging.getLogger(__name__)


class ByteCodeVM:
    """Assigns sequential process ids and owns every spawned process.

    Spawning takes a lock so ids stay dense when processes are created
    from several threads; each process's own state is never shared.
    """

    def __init__(self, output: TextIO | None = None):
        self._processes: list[Process] = []
        self._lock = threading.Lock()
        self._output = output

    def spawn(self) -> Process:
        with self._lock:
            process = Process(len(self._processes), output=self._output)
            self._processes.append(process)
        logger.debug("Spawned process %d", process.pid)
        return process

    @property
    def processes(self) -> tuple[Process, ...]:
        return tuple(self._processes)

    def get(self, pid: int) -> Process:
        if not 0 <= pid < len(self._processes):
            raise ValueError(f"No process with id {pid}")
        return self._processes[pid]

    def __len__(self) -> int:
        return len(self._processes)
