from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import InvalidArgument

TIMEOUT_MS = 1000
# poll() takes a C int of milliseconds
MAX_TIMEOUT_MS = 2**31 - 1
MAX_THREADS = 1000

# Hard ceiling on pool threads regardless of --threads
POOL_CEILING = 128
FALLBACK_CPU_COUNT = 4


@dataclass(frozen=True)
class ScanConfig:
    timeout_ms: int = TIMEOUT_MS
    max_threads: int = MAX_THREADS
    progress_every: int = 0

    def __post_init__(self):
        if self.timeout_ms < 0 or self.timeout_ms > MAX_TIMEOUT_MS:
            raise InvalidArgument(f"timeout must be 0-{MAX_TIMEOUT_MS} ms (got {self.timeout_ms})")
        if self.max_threads < 1:
            raise InvalidArgument(f"threads must be >= 1 (got {self.max_threads})")
        if self.progress_every < 0:
            raise InvalidArgument(f"progress interval must be >= 0 (got {self.progress_every})")

    def pool_size(self) -> int:
        """Worker threads actually started: min(max_threads, POOL_CEILING, cpu count)."""
        cpus = os.cpu_count() or FALLBACK_CPU_COUNT
        return max(1, min(self.max_threads, POOL_CEILING, cpus))
