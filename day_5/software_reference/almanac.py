"""
Almanac - Seed to Location Lookup

Software reference for the seed-location problem. An almanac is an ordered
chain of stages; each stage maps disjoint source intervals onto destination
intervals by adding a constant offset, and leaves every other value alone.

Two questions are answered:
    1. The lowest location reachable from a list of individual seeds.
    2. The lowest location reachable from seed ranges formed by pairing
       consecutive seeds. Ranges can be billions wide, so they are pushed
       through the stages as intervals and split where they straddle a
       domain boundary instead of being enumerated.

Both answers must agree with evaluating every seed on its own, which is what
software_reference.brute_force does for small inputs.
"""

from bisect import bisect_right
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

from software_reference.intervals import Interval, make_interval, merge_intervals


# Values and images are unsigned 64-bit words, offsets signed 64-bit.
# The RTL lookup uses the same width by default.
VALUE_WIDTH = 64
VALUE_LIMIT = 1 << VALUE_WIDTH
OFFSET_MIN = -(1 << (VALUE_WIDTH - 1))
OFFSET_MAX = (1 << (VALUE_WIDTH - 1)) - 1

PAIRINGS = ("bounds", "length")


class AlmanacError(Exception):
    """Base class for every error raised by the almanac engine."""


class MalformedStage(AlmanacError, ValueError):
    """A stage has overlapping domain intervals."""


class MalformedInput(AlmanacError, ValueError):
    """Seed list or almanac text cannot be interpreted."""


class ArithmeticOverflow(AlmanacError, OverflowError):
    """A value, bound or offset does not fit the value width."""


class EmptyResult(AlmanacError, ValueError):
    """Nothing left to take the minimum of."""


def check_value(value: int, what: str = "value") -> int:
    if not 0 <= value < VALUE_LIMIT:
        raise ArithmeticOverflow(
            f"{what} {value} does not fit in {VALUE_WIDTH} unsigned bits"
        )
    return value


class StageEntry(NamedTuple):
    """One row of a stage: a domain interval and the offset applied to it."""

    domain: Interval
    offset: int


class Stage:
    """
    One lookup table of the almanac.

    Entries are kept sorted by domain start and never change after
    construction, so a Stage can be shared between threads and pickled to
    worker processes.
    """

    def __init__(self, entries: Iterable[Tuple[Interval, int]], name: Optional[str] = None):
        """
        Build a stage from (domain, offset) pairs.

        Args:
            entries: Iterable of (Interval, offset) pairs
            name: Optional label, e.g. "seed-to-soil"

        Raises:
            MalformedStage: Two domain intervals overlap
            ArithmeticOverflow: A bound, offset or image exceeds the value width
        """
        self.name = name

        sorted_entries = sorted(
            (StageEntry(domain, offset) for domain, offset in entries),
            key=lambda entry: entry.domain.start,
        )

        for entry in sorted_entries:
            check_value(entry.domain.start, "domain start")
            if entry.domain.end > VALUE_LIMIT:
                raise ArithmeticOverflow(
                    f"domain end {entry.domain.end} exceeds {VALUE_WIDTH} bits"
                )
            if not OFFSET_MIN <= entry.offset <= OFFSET_MAX:
                raise ArithmeticOverflow(
                    f"offset {entry.offset} does not fit in {VALUE_WIDTH} signed bits"
                )
            # Images are contiguous, so checking both ends covers the domain
            check_value(entry.domain.start + entry.offset, "image start")
            check_value(entry.domain.end - 1 + entry.offset, "image end")

        for previous, current in zip(sorted_entries, sorted_entries[1:]):
            if current.domain.start < previous.domain.end:
                raise MalformedStage(
                    f"stage {name or '<unnamed>'}: domain "
                    f"[{current.domain.start}, {current.domain.end}) overlaps "
                    f"[{previous.domain.start}, {previous.domain.end})"
                )

        self.entries = tuple(sorted_entries)
        self._starts = [entry.domain.start for entry in self.entries]

    @classmethod
    def from_triples(cls, triples: Iterable[Tuple[int, int, int]], name: Optional[str] = None) -> "Stage":
        """
        Build a stage from (target_start, source_start, length) triples.

        Zero-length triples cover nothing and are dropped.
        """
        entries = []
        for target_start, source_start, length in triples:
            domain = make_interval(source_start, source_start + length)
            if domain is None:
                continue
            entries.append((domain, target_start - source_start))
        return cls(entries, name=name)

    def __len__(self):
        return len(self.entries)

    def __iter__(self) -> Iterator[StageEntry]:
        return iter(self.entries)

    def __eq__(self, other):
        if not isinstance(other, Stage):
            return NotImplemented
        return self.entries == other.entries

    def __hash__(self):
        return hash(self.entries)

    def __repr__(self):
        label = f"{self.name!r}, " if self.name else ""
        return f"Stage({label}{list(self.entries)!r})"

    def find_entry(self, value: int) -> Optional[StageEntry]:
        """Return the entry whose domain contains ``value``, if any."""
        index = bisect_right(self._starts, value) - 1
        if index >= 0 and value in self.entries[index].domain:
            return self.entries[index]
        return None

    def lookup_scalar(self, value: int) -> int:
        """Image of a single value; uncovered values map to themselves."""
        check_value(value, "seed")
        entry = self.find_entry(value)
        if entry is None:
            return value
        return value + entry.offset

    def lookup_points(self, values: Iterable[int]) -> List[int]:
        """
        Image of every value in ``values``, in input order.

        Each value is translated by at most one entry: once an entry has moved
        it, later entries of this stage must not see the new position.
        """
        pending = [(check_value(value, "seed"), False) for value in values]

        for entry in self.entries:
            for index, (value, translated) in enumerate(pending):
                if not translated and value in entry.domain:
                    pending[index] = (value + entry.offset, True)

        return [value for value, _ in pending]

    def _first_overlap(self, interval: Interval) -> Optional[StageEntry]:
        # Entries are sorted and disjoint: the only candidates start before
        # interval.end, and the first overlapping one is found scanning up
        # from the entry that could contain interval.start.
        index = max(bisect_right(self._starts, interval.start) - 1, 0)
        while index < len(self.entries):
            entry = self.entries[index]
            if entry.domain.start >= interval.end:
                return None
            if entry.domain.overlaps(interval):
                return entry
            index += 1
        return None

    def lookup_ranges(self, ranges: Iterable[Interval]) -> List[Interval]:
        """
        Image of the union of ``ranges``.

        Args:
            ranges: Iterable of Interval objects

        Returns:
            list: Image fragments, unmerged and in no particular order

        Algorithm:
            1. Push every input range onto a work stack
            2. Pop a range; if no domain overlaps it, it maps to itself
            3. Otherwise translate the overlapping part by that entry's
               offset and push the parts left and right of the overlap back
               onto the stack
            4. Stop when the stack is empty

        Every pop either resolves a range completely or removes a non-empty
        overlap from it, so the loop terminates.
        """
        stack = []
        for interval in ranges:
            check_value(interval.start, "range start")
            if interval.end > VALUE_LIMIT:
                raise ArithmeticOverflow(
                    f"range end {interval.end} exceeds {VALUE_WIDTH} bits"
                )
            stack.append(interval)

        images = []

        while stack:
            interval = stack.pop()
            entry = self._first_overlap(interval)

            if entry is None:
                images.append(interval)
                continue

            overlap = interval.intersect(entry.domain)
            images.append(overlap.shift(entry.offset))

            for leftover in (
                make_interval(interval.start, overlap.start),
                make_interval(overlap.end, interval.end),
            ):
                if leftover is not None:
                    stack.append(leftover)

        return images


StageTable = Sequence[Tuple[int, int, int]]


class Pipeline:
    """Ordered chain of stages, applied first to last."""

    def __init__(self, stages: Iterable[Stage]):
        self.stages = tuple(stages)

    @classmethod
    def from_tables(cls, tables: Iterable[StageTable], names: Optional[Sequence[Optional[str]]] = None) -> "Pipeline":
        tables = list(tables)
        if names is None:
            names = [None] * len(tables)
        if len(names) != len(tables):
            raise ValueError(f"{len(names)} names given for {len(tables)} stage tables")
        return cls(Stage.from_triples(table, name=name) for table, name in zip(tables, names))

    def __len__(self):
        return len(self.stages)

    def __iter__(self) -> Iterator[Stage]:
        return iter(self.stages)

    def __eq__(self, other):
        if not isinstance(other, Pipeline):
            return NotImplemented
        return self.stages == other.stages

    def __hash__(self):
        return hash(self.stages)

    def __repr__(self):
        return f"Pipeline({list(self.stages)!r})"

    def apply_scalar(self, value: int) -> int:
        for stage in self.stages:
            value = stage.lookup_scalar(value)
        return value

    def apply_points(self, values: Iterable[int]) -> List[int]:
        points = list(values)
        for stage in self.stages:
            points = stage.lookup_points(points)
        return points

    def apply_ranges(self, ranges: Iterable[Interval], coalesce: bool = False) -> List[Interval]:
        """
        Push a range set through every stage.

        The whole output of one stage is computed before the next stage
        starts: each stage's domains are defined over the previous stage's
        codomain.

        Args:
            ranges: Iterable of Interval objects
            coalesce: Merge overlapping and touching fragments before the first
                      stage and after every stage

        Returns:
            list: Image fragments after the last stage
        """
        fragments = list(ranges)
        if coalesce:
            fragments = merge_intervals(fragments)
        for stage in self.stages:
            fragments = stage.lookup_ranges(fragments)
            if coalesce:
                fragments = merge_intervals(fragments)
        return fragments

    def trace_ranges(self, ranges: Iterable[Interval], coalesce: bool = False) -> List[List[Interval]]:
        """Like apply_ranges, but return the range set after every stage."""
        fragments = list(ranges)
        if coalesce:
            fragments = merge_intervals(fragments)
        history = []
        for stage in self.stages:
            fragments = stage.lookup_ranges(fragments)
            if coalesce:
                fragments = merge_intervals(fragments)
            history.append(fragments)
        return history


def expand_points(seeds: Iterable[int]) -> List[int]:
    """Question 1 reading of the seed list: every seed is a point."""
    return [check_value(seed, "seed") for seed in seeds]


def expand_ranges(seeds: Sequence[int], pairing: str = "bounds") -> List[Interval]:
    """
    Question 2 reading of the seed list: consecutive seeds form ranges.

    Args:
        seeds: Flat list of seed values
        pairing: "bounds" reads a pair (a, b) as [min(a, b), max(a, b));
                 "length" reads it as [a, a + b)

    Returns:
        list: Non-empty intervals, in seed order

    Raises:
        MalformedInput: Odd number of seeds or unknown pairing
    """
    if pairing not in PAIRINGS:
        raise MalformedInput(f"unknown pairing {pairing!r}, expected one of {PAIRINGS}")

    seeds = list(seeds)
    if len(seeds) % 2:
        raise MalformedInput(
            f"range mode needs an even number of seeds, got {len(seeds)} "
            f"(last seed {seeds[-1]} is unpaired)"
        )

    ranges = []
    for first, second in zip(seeds[0::2], seeds[1::2]):
        check_value(first, "seed")
        check_value(second, "seed")

        if pairing == "bounds":
            interval = make_interval(min(first, second), max(first, second))
        else:
            interval = make_interval(first, first + second)

        if interval is not None:
            if interval.end > VALUE_LIMIT:
                raise ArithmeticOverflow(
                    f"seed range end {interval.end} exceeds {VALUE_WIDTH} bits"
                )
            ranges.append(interval)

    return ranges


def minimize_points(points: Iterable[int]) -> int:
    points = list(points)
    if not points:
        raise EmptyResult("no seeds to take the minimum of")
    return min(points)


def minimize_ranges(ranges: Iterable[Interval]) -> int:
    """
    Smallest value covered by a range set.

    The smallest value of an interval is its start, and every stage moves an
    unsplit interval by a constant, so the start stays the smallest value.
    """
    starts = [interval.start for interval in ranges]
    if not starts:
        raise EmptyResult("no non-empty seed ranges to take the minimum of")
    return min(starts)


def as_pipeline(stages: Union[Pipeline, Iterable[StageTable]]) -> Pipeline:
    if isinstance(stages, Pipeline):
        return stages
    return Pipeline.from_tables(stages)


def solve_scalar(seeds: Iterable[int], stages: Union[Pipeline, Iterable[StageTable]]) -> int:
    """Lowest location of any individual seed."""
    pipeline = as_pipeline(stages)
    return minimize_points(pipeline.apply_points(expand_points(seeds)))


def solve_ranged(seeds: Sequence[int], stages: Union[Pipeline, Iterable[StageTable]],
                 pairing: str = "bounds") -> int:
    """Lowest location of any seed in the paired seed ranges."""
    pipeline = as_pipeline(stages)
    ranges = expand_ranges(seeds, pairing=pairing)
    return minimize_ranges(pipeline.apply_ranges(ranges, coalesce=True))
