"""
Brute-force seed enumeration.

Evaluates every seed of every range on its own and reduces the locations with
min. Work is split into chunks and spread over a concurrent.futures executor;
min is associative and commutative, so chunking and completion order do not
change the answer.

This is the validation oracle for the interval-splitting solver. It costs time
proportional to the total width of the seed ranges, so it refuses inputs wider
than ``limit`` seeds.
"""

from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Iterable, Iterator, List, Optional, Tuple

from software_reference.almanac import EmptyResult, Pipeline
from software_reference.intervals import Interval, total_length


DEFAULT_CHUNK_SIZE = 4096
DEFAULT_LIMIT = 10_000_000


def range_points(ranges: Iterable[Interval]) -> Iterator[int]:
    """Every integer covered by ``ranges``, range by range."""
    for interval in ranges:
        yield from interval


def split_chunks(ranges: Iterable[Interval], chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[Tuple[int, int]]:
    """
    Cut ranges into (start, end) chunks of at most ``chunk_size`` seeds.

    Args:
        ranges: Iterable of Interval objects
        chunk_size: Maximum seeds per chunk (must be positive)

    Returns:
        list: Half-open (start, end) bounds covering the same seeds
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    chunks = []
    for interval in ranges:
        for start in range(interval.start, interval.end, chunk_size):
            chunks.append((start, min(start + chunk_size, interval.end)))
    return chunks


def chunk_minimum(pipeline: Pipeline, start: int, end: int) -> Optional[int]:
    """Lowest location of the seeds in [start, end), or None if it is empty."""
    best = None
    for seed in range(start, end):
        location = pipeline.apply_scalar(seed)
        if best is None or location < best:
            best = location
    return best


def enumerate_minimum(pipeline: Pipeline, ranges: Iterable[Interval],
                      max_workers: Optional[int] = None,
                      chunk_size: int = DEFAULT_CHUNK_SIZE,
                      limit: Optional[int] = DEFAULT_LIMIT,
                      executor=None) -> int:
    """
    Lowest location of any seed in ``ranges``, found by enumeration.

    Args:
        pipeline: Stages to push every seed through
        ranges: Iterable of Interval objects
        max_workers: Process count when no executor is given (default: CPUs)
        chunk_size: Seeds per submitted task
        limit: Refuse to enumerate more seeds than this (None: no limit)
        executor: Optional concurrent.futures executor to submit to; a
                  ProcessPoolExecutor is created and shut down otherwise

    Returns:
        int: Minimum location

    Raises:
        EmptyResult: The ranges cover no seeds
        ValueError: The ranges cover more than ``limit`` seeds
    """
    ranges = list(ranges)
    width = total_length(ranges)

    if limit is not None and width > limit:
        raise ValueError(
            f"refusing to enumerate {width} seeds (limit {limit}); "
            f"use the interval-splitting solver"
        )

    chunks = split_chunks(ranges, chunk_size)
    if not chunks:
        raise EmptyResult("no seeds to enumerate")

    if executor is None:
        with ProcessPoolExecutor(max_workers=max_workers) as pool:
            return _reduce_chunks(pool, pipeline, chunks)
    return _reduce_chunks(executor, pipeline, chunks)


def _reduce_chunks(executor, pipeline, chunks):
    futures = [
        executor.submit(chunk_minimum, pipeline, start, end)
        for start, end in chunks
    ]

    best = None
    for future in as_completed(futures):
        local = future.result()
        if local is not None and (best is None or local < best):
            best = local

    if best is None:
        raise EmptyResult("no seeds to enumerate")
    return best
