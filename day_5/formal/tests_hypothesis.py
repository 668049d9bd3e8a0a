"""
Property-based tests for the almanac engine using Hypothesis.

The interval-splitting lookups are checked against per-seed evaluation: a
range set and the integers it covers are the same object, so every range
operation must agree with applying the scalar operation to each integer.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from hypothesis import given, strategies as st, assume, settings
from hypothesis.strategies import lists, integers

from software_reference.almanac import (
    Pipeline,
    Stage,
    expand_ranges,
    solve_ranged,
    solve_scalar,
)
from software_reference.brute_force import enumerate_minimum, range_points
from software_reference.intervals import Interval, merge_intervals, total_length


MAX_VALUE = 1000


# Strategy for generating stages with disjoint domains
@st.composite
def stage_strategy(draw, max_entries=6):
    """Generate a stage from sorted unique cut points taken two at a time."""
    cuts = draw(lists(integers(min_value=0, max_value=MAX_VALUE),
                      max_size=2 * max_entries, unique=True))
    cuts.sort()
    triples = []
    for start, end in zip(cuts[0::2], cuts[1::2]):
        target = draw(integers(min_value=0, max_value=MAX_VALUE))
        triples.append((target, start, end - start))
    triples = draw(st.permutations(triples))
    return Stage.from_triples(triples)


pipeline_strategy = lists(stage_strategy(), max_size=5).map(Pipeline)


@st.composite
def permutation_stage_strategy(draw, max_blocks=6):
    """
    Generate a stage that permutes adjacent blocks of one span.

    The targets tile the same span as the domains, so every integer has
    exactly one preimage.
    """
    cuts = draw(lists(integers(min_value=0, max_value=MAX_VALUE),
                      min_size=2, max_size=max_blocks + 1, unique=True))
    cuts.sort()
    blocks = list(zip(cuts, cuts[1:]))
    order = draw(st.permutations(blocks))

    triples = []
    target = cuts[0]
    for start, end in order:
        triples.append((target, start, end - start))
        target += end - start
    return Stage.from_triples(triples)


@st.composite
def interval_strategy(draw):
    """Generate a non-empty interval of at most 200 values."""
    start = draw(integers(min_value=0, max_value=MAX_VALUE + 200))
    length = draw(integers(min_value=1, max_value=200))
    return Interval(start, start + length)


ranges_strategy = lists(interval_strategy(), min_size=0, max_size=6)

seeds_strategy = lists(integers(min_value=0, max_value=MAX_VALUE + 200),
                       min_size=2, max_size=8).filter(lambda seeds: len(seeds) % 2 == 0)


def covered(ranges):
    """Set of all integers covered by a list of intervals."""
    result = set()
    for interval in ranges:
        result.update(range(interval.start, interval.end))
    return result


def has_no_overlaps(ranges):
    ordered = sorted(ranges)
    for i in range(len(ordered) - 1):
        if ordered[i].end > ordered[i + 1].start:
            return False
    return True


# Property 1: A one-value range maps exactly like the scalar lookup
@given(stage_strategy(), integers(min_value=0, max_value=MAX_VALUE + 200))
def test_scalar_range_equivalence(stage, value):
    image = stage.lookup_ranges([Interval(value, value + 1)])
    assert len(image) == 1
    assert image[0].start == stage.lookup_scalar(value)


# Property 2: Splitting never gains or loses integers
@given(stage_strategy(), ranges_strategy)
def test_length_preservation(stage, ranges):
    assert total_length(stage.lookup_ranges(ranges)) == total_length(ranges)


# Property 3: Range image equals the pointwise image
@given(stage_strategy(), ranges_strategy)
@settings(max_examples=300, deadline=None)
def test_stage_image_matches_pointwise(stage, ranges):
    expected = {stage.lookup_scalar(v) for v in covered(ranges)}
    assert covered(stage.lookup_ranges(ranges)) == expected


# Property 4: A block permutation keeps disjoint fragments disjoint
@given(permutation_stage_strategy(), ranges_strategy)
def test_permutation_keeps_fragments_disjoint(stage, ranges):
    merged = merge_intervals(ranges)
    assert has_no_overlaps(stage.lookup_ranges(merged))


# Property 5: Bulk point lookup matches one-at-a-time lookup
@given(stage_strategy(), lists(integers(min_value=0, max_value=MAX_VALUE + 200), max_size=30))
def test_lookup_points_matches_scalar(stage, values):
    assert stage.lookup_points(values) == [stage.lookup_scalar(v) for v in values]


# Property 6: No hidden state between calls
@given(pipeline_strategy, ranges_strategy)
def test_pipeline_determinism(pipeline, ranges):
    assert pipeline.apply_ranges(ranges) == pipeline.apply_ranges(ranges)


# Property 7: Whole pipeline agrees with per-seed evaluation
@given(pipeline_strategy, ranges_strategy)
@settings(max_examples=300, deadline=None)
def test_pipeline_image_matches_pointwise(pipeline, ranges):
    expected = {pipeline.apply_scalar(v) for v in covered(ranges)}
    assert covered(pipeline.apply_ranges(ranges)) == expected


# Property 8: Coalescing between stages keeps the same integers
@given(pipeline_strategy, ranges_strategy)
def test_coalesce_preserves_coverage(pipeline, ranges):
    plain = pipeline.apply_ranges(ranges)
    coalesced = pipeline.apply_ranges(ranges, coalesce=True)
    assert covered(coalesced) == covered(plain)
    assert has_no_overlaps(coalesced)


# Property 9: Both solvers agree on the enumerated point set
@given(seeds_strategy, pipeline_strategy, st.sampled_from(["bounds", "length"]))
@settings(deadline=None)
def test_strategy_agreement(seeds, pipeline, pairing):
    ranges = expand_ranges(seeds, pairing=pairing)
    assume(ranges)

    points = list(range_points(ranges))
    assert solve_scalar(points, pipeline) == solve_ranged(seeds, pipeline, pairing=pairing)


# Property 10: Parallel enumeration agrees with interval splitting
@given(seeds_strategy, pipeline_strategy, integers(min_value=16, max_value=256))
@settings(max_examples=50, deadline=None)
def test_enumeration_agreement(seeds, pipeline, chunk_size):
    ranges = expand_ranges(seeds)
    assume(ranges)

    with ThreadPoolExecutor(max_workers=4) as executor:
        brute = enumerate_minimum(pipeline, ranges, chunk_size=chunk_size, executor=executor)

    assert brute == solve_ranged(seeds, pipeline)


# Property 11: Merged intervals cover the same integers, sorted and separated
@given(ranges_strategy)
def test_merge_intervals(ranges):
    merged = merge_intervals(ranges)

    assert covered(merged) == covered(ranges)
    for i in range(len(merged) - 1):
        assert merged[i].end < merged[i + 1].start
    assert merge_intervals(merged) == merged


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
