"""
Concrete test cases for the almanac engine: worked examples, boundaries and
the error taxonomy.
"""

import pickle

import pytest

from software_reference.almanac import (
    VALUE_LIMIT,
    AlmanacError,
    ArithmeticOverflow,
    EmptyResult,
    MalformedInput,
    MalformedStage,
    Pipeline,
    Stage,
    expand_points,
    expand_ranges,
    minimize_points,
    minimize_ranges,
    solve_ranged,
    solve_scalar,
)
from software_reference.intervals import Interval, make_interval, merge_intervals, total_length


@pytest.fixture
def plus_five():
    """domain [10, 13) offset +5, everything else identity."""
    return Stage.from_triples([(15, 10, 3)])


@pytest.fixture
def chain():
    return Pipeline.from_tables([[(10, 0, 5)], [(7, 10, 5)]])


def test_worked_example_scalars(plus_five):
    assert [plus_five.lookup_scalar(v) for v in [5, 12, 20]] == [5, 17, 20]
    assert solve_scalar([5, 12, 20], Pipeline([plus_five])) == 5


def test_worked_example_range(plus_five):
    image = plus_five.lookup_ranges([Interval(10, 15)])
    assert sorted(image) == [Interval(13, 15), Interval(15, 18)]
    assert sum(interval.length for interval in image) == 5
    assert minimize_ranges(image) == 13


def test_range_equal_to_domain_is_not_fragmented(plus_five):
    assert plus_five.lookup_ranges([Interval(10, 13)]) == [Interval(15, 18)]


def test_range_covering_domain_splits_in_three(plus_five):
    image = plus_five.lookup_ranges([Interval(0, 100)])
    assert sorted(image) == [Interval(0, 10), Interval(13, 100), Interval(15, 18)]


def test_range_outside_every_domain_maps_to_itself(plus_five):
    assert plus_five.lookup_ranges([Interval(13, 40)]) == [Interval(13, 40)]
    assert plus_five.lookup_ranges([Interval(0, 10)]) == [Interval(0, 10)]


def test_range_spanning_several_domains():
    stage = Stage.from_triples([(100, 0, 5), (200, 10, 5), (300, 20, 5)])
    image = stage.lookup_ranges([Interval(3, 22)])
    assert sorted(image) == [
        Interval(5, 10), Interval(15, 20),
        Interval(103, 105), Interval(200, 205), Interval(300, 302),
    ]


def test_stage_does_not_merge_fragments():
    # Image of [0, 5) lands right before [5, 10), but stays a separate fragment
    stage = Stage.from_triples([(0, 100, 5)])
    image = stage.lookup_ranges([Interval(5, 10), Interval(100, 105)])
    assert sorted(image) == [Interval(0, 5), Interval(5, 10)]


def test_multi_stage_chain(chain):
    assert chain.stages[0].lookup_scalar(2) == 12
    assert chain.apply_scalar(2) == 9
    assert solve_scalar([2], chain) == 9
    # 6 is covered by neither domain and stays 6
    assert chain.apply_scalar(6) == 6
    assert solve_scalar([2, 6], chain) == 6


def test_chain_ranges_finish_each_stage_first(chain):
    # [0, 5) -> [10, 15) in stage one, which is exactly stage two's domain
    assert chain.apply_ranges([Interval(0, 5)]) == [Interval(7, 12)]


def test_coalesce_joins_touching_fragments(plus_five):
    pipeline = Pipeline([plus_five])
    assert sorted(pipeline.apply_ranges([Interval(10, 15)])) == [Interval(13, 15), Interval(15, 18)]
    assert pipeline.apply_ranges([Interval(10, 15)], coalesce=True) == [Interval(13, 18)]


def test_trace_ranges_reports_every_stage(chain):
    history = chain.trace_ranges([Interval(0, 8)])
    assert len(history) == 2
    assert sorted(history[0]) == [Interval(5, 8), Interval(10, 15)]
    assert sorted(history[1]) == [Interval(5, 8), Interval(7, 12)]


def test_lookup_points_translates_once_per_stage():
    # 0 -> 10 by the first entry; the second entry must not move it again
    stage = Stage.from_triples([(10, 0, 5), (50, 10, 5)])
    assert stage.lookup_points([0, 10, 7]) == [10, 50, 7]


def test_empty_pipeline_is_identity():
    pipeline = Pipeline([])
    assert pipeline.apply_scalar(42) == 42
    assert pipeline.apply_ranges([Interval(3, 9)]) == [Interval(3, 9)]
    assert solve_ranged([9, 3], pipeline) == 3


def test_from_triples_drops_zero_length():
    stage = Stage.from_triples([(5, 0, 0), (15, 10, 3)])
    assert len(stage) == 1


def test_stage_entries_sorted_by_domain():
    stage = Stage.from_triples([(0, 50, 5), (100, 10, 5)], name="seed-to-soil")
    assert [entry.domain.start for entry in stage] == [10, 50]
    assert stage.name == "seed-to-soil"


def test_pipeline_pickles(chain):
    restored = pickle.loads(pickle.dumps(chain))
    assert restored == chain
    assert restored.apply_scalar(2) == 9


def test_from_tables_rejects_name_count_mismatch():
    with pytest.raises(ValueError):
        Pipeline.from_tables([[(10, 0, 5)]], names=["a", "b"])


# SeedExpander

def test_expand_points_keeps_order():
    assert expand_points([79, 14, 55, 13]) == [79, 14, 55, 13]


def test_expand_ranges_bounds_pairing():
    assert expand_ranges([79, 14, 55, 13]) == [Interval(14, 79), Interval(13, 55)]


def test_expand_ranges_length_pairing():
    assert expand_ranges([79, 14, 55, 13], pairing="length") == [Interval(79, 93), Interval(55, 68)]


def test_expand_ranges_drops_empty_pairs():
    assert expand_ranges([5, 5, 1, 3]) == [Interval(1, 3)]
    assert expand_ranges([7, 0], pairing="length") == []


def test_expand_ranges_odd_count():
    with pytest.raises(MalformedInput):
        expand_ranges([1, 2, 3])


def test_expand_ranges_unknown_pairing():
    with pytest.raises(MalformedInput):
        expand_ranges([1, 2], pairing="diagonal")


# Minimizer

def test_minimize_points():
    assert minimize_points([5, 17, 20]) == 5


def test_minimize_empty():
    with pytest.raises(EmptyResult):
        minimize_points([])
    with pytest.raises(EmptyResult):
        minimize_ranges([])


def test_solve_ranged_all_empty_ranges(plus_five):
    with pytest.raises(EmptyResult):
        solve_ranged([4, 4, 9, 9], Pipeline([plus_five]))


def test_solve_scalar_no_seeds(plus_five):
    with pytest.raises(EmptyResult):
        solve_scalar([], Pipeline([plus_five]))


# Error taxonomy

def test_overlapping_domains_rejected():
    with pytest.raises(MalformedStage):
        Stage.from_triples([(0, 10, 5), (100, 14, 2)])


def test_touching_domains_accepted():
    stage = Stage.from_triples([(0, 10, 5), (100, 15, 2)])
    assert stage.lookup_scalar(14) == 4
    assert stage.lookup_scalar(15) == 100


def test_image_overflow_rejected():
    with pytest.raises(ArithmeticOverflow):
        Stage.from_triples([(VALUE_LIMIT - 2, 0, 5)])


def test_negative_image_rejected():
    with pytest.raises(ArithmeticOverflow):
        Stage([(Interval(0, 5), -1)])


def test_domain_beyond_width_rejected():
    with pytest.raises(ArithmeticOverflow):
        Stage.from_triples([(0, VALUE_LIMIT - 1, 2)])


def test_seed_beyond_width_rejected(plus_five):
    with pytest.raises(ArithmeticOverflow):
        plus_five.lookup_scalar(VALUE_LIMIT)
    with pytest.raises(ArithmeticOverflow):
        expand_points([-1])


def test_errors_share_base_and_builtin():
    for error in (MalformedStage, MalformedInput, EmptyResult):
        assert issubclass(error, AlmanacError)
        assert issubclass(error, ValueError)
    assert issubclass(ArithmeticOverflow, AlmanacError)
    assert issubclass(ArithmeticOverflow, OverflowError)


# Intervals

def test_empty_interval_rejected():
    with pytest.raises(ValueError):
        Interval(5, 5)
    assert make_interval(5, 5) is None


def test_interval_intersection():
    assert Interval(0, 10).intersect(Interval(5, 20)) == Interval(5, 10)
    assert Interval(0, 10).intersect(Interval(10, 20)) is None


def test_merge_touching_intervals():
    assert merge_intervals([Interval(5, 10), Interval(1, 5), Interval(20, 30), Interval(25, 26)]) == [
        Interval(1, 10), Interval(20, 30),
    ]


def test_full_width_range_length():
    ranges = expand_ranges([0, VALUE_LIMIT - 1])
    assert ranges == [Interval(0, VALUE_LIMIT - 1)]
    assert total_length(ranges) == VALUE_LIMIT - 1
    assert solve_ranged([0, VALUE_LIMIT - 1], Pipeline([])) == 0


def test_coalesce_merges_input_of_empty_pipeline():
    pipeline = Pipeline([])
    ranges = [Interval(0, 1), Interval(0, 1), Interval(1, 4)]
    assert pipeline.apply_ranges(ranges) == ranges
    assert pipeline.apply_ranges(ranges, coalesce=True) == [Interval(0, 4)]
    assert pipeline.trace_ranges(ranges, coalesce=True) == []


def test_coalesce_merges_duplicate_input_before_first_stage(plus_five):
    pipeline = Pipeline([plus_five])
    ranges = [Interval(10, 12), Interval(10, 12)]
    assert sorted(pipeline.apply_ranges(ranges)) == [Interval(15, 17), Interval(15, 17)]
    assert pipeline.apply_ranges(ranges, coalesce=True) == [Interval(15, 17)]


def test_translated_image_can_land_on_identity_values():
    # 0 moves onto 1, which is outside every domain and stays put
    stage = Stage.from_triples([(1, 0, 1)])
    assert sorted(stage.lookup_ranges([Interval(0, 2)])) == [Interval(1, 2), Interval(1, 2)]
