"""
Runtime efficiency probes.

Three small, deterministic micro-benchmarks that check the evaluation
host behaves sanely: a vectorized reduction beats an interpreted nested
loop, a throwaway workload does not leave memory behind, and a
preallocated loop does not leak allocated blocks. Each probe reports
pass/fail plus the measured value.

The probes read process-wide counters (tracemalloc, allocated blocks),
so they must not run concurrently with other evaluators.
"""

import gc
import sys
import random
import timeit
import tracemalloc
from dataclasses import dataclass

PROBE_SEED = 42
WORKLOAD_SIZE = 10_000
INNER_LOOP = 10


@dataclass(frozen=True)
class ProbeResult:
    name: str
    passed: bool
    measured: float
    limit: float


def _efficient_sum(n):
    return sum(range(n))


def _inefficient_sum(n):
    result = 0
    for i in range(n):
        for _ in range(INNER_LOOP):
            result += i
    return result // INNER_LOOP


def _throwaway_workload(rng, rounds=100, size=1000):
    total = 0.0
    for _ in range(rounds):
        temp = [rng.random() for _ in range(size)]
        total += sum(temp)
    return total


def _preallocated_workload(n):
    data = [0.0] * n
    for i in range(n):
        data[i] = i * 0.5
    return sum(data)


def probe_timing(repeats=5, n=WORKLOAD_SIZE):
    """The vectorized reduction must be faster than the nested loop."""
    efficient = min(timeit.repeat(lambda: _efficient_sum(n), number=3, repeat=repeats))
    inefficient = min(timeit.repeat(lambda: _inefficient_sum(n), number=3, repeat=repeats))
    return ProbeResult("timing_comparison", efficient < inefficient, efficient, inefficient)


def probe_memory_growth(limit_bytes, seed=PROBE_SEED):
    """Traced memory after a throwaway workload must stay within limit_bytes of the start."""
    rng = random.Random(seed)
    started_here = not tracemalloc.is_tracing()
    if started_here:
        tracemalloc.start()
    try:
        gc.collect()
        before, _peak = tracemalloc.get_traced_memory()
        _throwaway_workload(rng)
        gc.collect()
        after, _peak = tracemalloc.get_traced_memory()
    finally:
        if started_here:
            tracemalloc.stop()
    growth = max(0, after - before)
    return ProbeResult("memory_growth", growth <= limit_bytes, float(growth), float(limit_bytes))


def probe_allocations(limit_blocks, n=WORKLOAD_SIZE):
    """A preallocated loop must not leave more than limit_blocks allocated."""
    gc.collect()
    before = sys.getallocatedblocks()
    _preallocated_workload(n)
    gc.collect()
    leftover = max(0, sys.getallocatedblocks() - before)
    return ProbeResult("allocation_count", leftover <= limit_blocks, float(leftover), float(limit_blocks))


def run_probes(config):
    """Run all probes with limits from config, in a fixed order."""
    return [
        probe_timing(int(config.get("timing_repeats", 5))),
        probe_memory_growth(int(config.get("max_memory_growth_bytes", 5 * 1024 * 1024))),
        probe_allocations(int(config.get("max_allocated_blocks", 1000))),
    ]
