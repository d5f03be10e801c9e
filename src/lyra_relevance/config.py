"""
Runtime defaults for the analyzer.

Each value can be overridden through an environment variable read at import time:

    LYRA_TOP_N                  number of tokens returned per query
    LYRA_SECTION_LENGTH         years per time section
    LYRA_QUERY_WORKERS          threads used for batch queries (capped at 64)
    LYRA_MIN_PARALLEL_QUERIES   batch size from which queries run in parallel
"""

from __future__ import annotations

import os


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class Config:
    """Global defaults used when a caller does not pass an explicit value."""

    top_n: int = _env_int("LYRA_TOP_N", 10)
    include_compilations: bool = True
    section_length: int = _env_int("LYRA_SECTION_LENGTH", 10)

    # Batch queries
    num_workers: int = min(_env_int("LYRA_QUERY_WORKERS", 8), 64)
    min_queries_for_parallel: int = _env_int("LYRA_MIN_PARALLEL_QUERIES", 10)
