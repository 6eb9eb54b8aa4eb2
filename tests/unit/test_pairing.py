import random

import pytest

from svcompare.config import ComparisonConfig
from svcompare.constants import SVTYPE
from svcompare.pairing.pairing import (
    VariantBucket,
    breakpoint_distances,
    equivalent,
    match_variants,
    overlap_proportion,
    score,
    size_proportion,
)

from ..util import build_variant


@pytest.fixture
def deletion():
    return build_variant(SVTYPE.DEL, '1', 1000, pos2=2000)


@pytest.fixture
def other_deletion():
    return build_variant(SVTYPE.DEL, '1', 1050, pos2=1950, source='other')


def match_one(main, others, **criteria):
    outcome, = match_variants([main], others, ComparisonConfig(**criteria))
    return outcome


def naive_match(main_variants, other_variants, config):
    """full scan of the other set for every main variant, used to check the windowed search"""
    consumed = set()
    result = []
    for main in main_variants:
        best_key = None
        best = None
        for index, other in enumerate(other_variants):
            if index in consumed or other.bucket_key != main.bucket_key:
                continue
            accepted = equivalent(main, other, config)
            if accepted is None:
                continue
            key = score(config, *accepted, other, index)
            if best_key is None or key < best_key:
                best_key = key
                best = index
        if best is not None:
            consumed.add(best)
        result.append(best)
    return result


def random_variants(rand, count, source, chroms=('1', '2')):
    variants = []
    for _ in range(count):
        event_type = rand.choice([SVTYPE.DEL, SVTYPE.DUP, SVTYPE.BND])
        chrom1 = rand.choice(chroms)
        start = rand.randint(1, 50000)
        if event_type == SVTYPE.BND:
            chrom2 = rand.choice(chroms)
            pos2 = rand.randint(1, 50000)
            variants.append(build_variant(event_type, chrom1, start, chrom2, pos2, source=source))
        else:
            pos2 = start + rand.randint(0, 5000)
            variants.append(build_variant(event_type, chrom1, start, pos2=pos2, source=source))
    return variants


class TestBreakpointDistances:
    def test_same_chromosome(self, deletion, other_deletion):
        assert breakpoint_distances(deletion, other_deletion) == (50, 50)

    def test_crosswise_chromosomes(self):
        main = build_variant(SVTYPE.BND, '3', 5000, '7', 6000)
        other = build_variant(SVTYPE.BND, '7', 6010, '3', 5005, source='other')
        assert breakpoint_distances(main, other) == (5, 10)


class TestOverlapProportion:
    def test_intervals(self, deletion, other_deletion):
        assert overlap_proportion(deletion, other_deletion) == pytest.approx(0.9)

    def test_breakend(self, deletion):
        other = build_variant(SVTYPE.BND, '1', 1000, pos2=2000)
        assert overlap_proportion(deletion, other) is None


class TestSizeProportion:
    def test_proportion(self):
        main = build_variant(SVTYPE.DUP, '2', 1, pos2=100000, length=100000)
        other = build_variant(SVTYPE.DUP, '2', 50, pos2=150, length=100)
        assert size_proportion(main, other) == pytest.approx(0.001)
        assert size_proportion(other, main) == pytest.approx(0.001)

    def test_unknown_size(self, deletion):
        other = build_variant(SVTYPE.DEL, '1', 1000, pos2=2000, length=None)
        assert size_proportion(deletion, other) is None

    def test_zero_sizes(self):
        main = build_variant(SVTYPE.INS, '1', 100)
        assert size_proportion(main, main) == 1.0


class TestEquivalent:
    def test_distance_within_threshold(self, deletion, other_deletion):
        result = equivalent(deletion, other_deletion, ComparisonConfig(distance_threshold=100))
        assert result[:2] == (50, 50)
        assert result[2] == pytest.approx(0.9)

    def test_distance_exceeds_threshold(self, deletion, other_deletion):
        assert equivalent(deletion, other_deletion, ComparisonConfig(distance_threshold=10)) is None

    def test_distance_threshold_is_inclusive(self, deletion, other_deletion):
        assert equivalent(deletion, other_deletion, ComparisonConfig(distance_threshold=50))

    def test_overlap_within_threshold(self, deletion, other_deletion):
        assert equivalent(deletion, other_deletion, ComparisonConfig(intersection_threshold=0.85))

    def test_overlap_below_threshold(self, deletion, other_deletion):
        config = ComparisonConfig(intersection_threshold=0.95)
        assert equivalent(deletion, other_deletion, config) is None

    def test_minimal_proportion_rejects(self):
        main = build_variant(SVTYPE.DUP, '2', 1, pos2=100000, length=100000)
        other = build_variant(SVTYPE.DUP, '2', 50, pos2=150, length=100, source='other')
        lenient = ComparisonConfig(distance_threshold=100000)
        assert equivalent(main, other, lenient)
        assert equivalent(main, other, lenient.with_criteria(minimal_proportion=0.01)) is None

    def test_minimal_proportion_skipped_for_unknown_size(self):
        main = build_variant(SVTYPE.DEL, '2', 1, pos2=1000)
        other = build_variant(SVTYPE.DEL, '2', 1, pos2=1000, length=None, source='other')
        assert equivalent(main, other, ComparisonConfig(minimal_proportion=0.99))

    def test_common_genes_required(self, deletion):
        other = build_variant(SVTYPE.DEL, '1', 1050, pos2=1950, genes={'GENEB'}, source='other')
        config = ComparisonConfig(distance_threshold=100, require_common_genes=True)
        assert equivalent(deletion, other, config) is None
        main = build_variant(SVTYPE.DEL, '1', 1000, pos2=2000, genes={'GENEA', 'GENEB'})
        assert equivalent(main, other, config)

    def test_overlap_not_applied_to_breakends(self):
        main = build_variant(SVTYPE.BND, '1', 1000, '2', 2000)
        other = build_variant(SVTYPE.BND, '1', 5000, '2', 9000, source='other')
        result = equivalent(main, other, ComparisonConfig(intersection_threshold=0.9))
        assert result == (4000, 7000, None)


class TestScore:
    def test_distance_ranks_first(self, other_deletion):
        config = ComparisonConfig(distance_threshold=100, intersection_threshold=0.5)
        closer = score(config, 5, 5, 0.5, other_deletion, 0)
        assert closer < score(config, 10, 5, 0.99, other_deletion, 0)

    def test_overlap_ranks_first_without_distance(self, other_deletion):
        config = ComparisonConfig(intersection_threshold=0.5)
        larger = score(config, 100, 100, 0.9, other_deletion, 0)
        assert larger < score(config, 0, 0, 0.8, other_deletion, 0)

    def test_overlap_ignored_with_distance_only(self, other_deletion):
        config = ComparisonConfig(distance_threshold=100)
        smaller = score(config, 5, 5, 0.5, other_deletion, 0)
        assert smaller == score(config, 5, 5, 0.99, other_deletion, 0)

    def test_distance_ignored_with_overlap_only(self, other_deletion):
        config = ComparisonConfig(intersection_threshold=0.5)
        closer = score(config, 0, 0, 0.8, other_deletion, 0)
        assert closer == score(config, 90, 90, 0.8, other_deletion, 0)


class TestVariantBucket:
    def test_window_by_distance(self):
        bucket = VariantBucket()
        for index, start in enumerate([100, 500, 1000, 1100, 5000]):
            bucket.add(index, build_variant(SVTYPE.DEL, '1', start, pos2=start + 10))
        bucket.sort()
        main = build_variant(SVTYPE.DEL, '1', 1000, pos2=1010)
        start, end = bucket.window(main, ComparisonConfig(distance_threshold=500))
        assert [v.pos1 for _, v in bucket.entries[start:end]] == [500, 1000, 1100]

    def test_window_without_criteria(self):
        bucket = VariantBucket()
        for index, start in enumerate([100, 500]):
            bucket.add(index, build_variant(SVTYPE.DEL, '1', start, pos2=start + 10))
        bucket.sort()
        main = build_variant(SVTYPE.DEL, '1', 1000, pos2=1010)
        assert bucket.window(main, ComparisonConfig()) == (0, 2)

    def test_window_tiny_overlap_threshold(self):
        bucket = VariantBucket()
        for index, start in enumerate([100, 1000]):
            bucket.add(index, build_variant(SVTYPE.DEL, '1', start, pos2=start + 1000))
        bucket.sort()
        main = build_variant(SVTYPE.DEL, '1', 1000, pos2=2000)
        assert bucket.window(main, ComparisonConfig(intersection_threshold=1e-310)) == (0, 2)


class TestMatchVariants:
    def test_scenario_distance(self, deletion, other_deletion):
        outcome = match_one(deletion, [other_deletion], distance_threshold=100)
        assert outcome.matched_variant == other_deletion
        assert outcome.distance == 100
        assert outcome.other_source == 'other'
        outcome = match_one(deletion, [other_deletion], distance_threshold=10)
        assert outcome.matched_variant is None

    def test_scenario_overlap(self, deletion, other_deletion):
        outcome = match_one(deletion, [other_deletion], intersection_threshold=0.85)
        assert outcome.matched
        assert outcome.overlap == pytest.approx(0.9)
        outcome = match_one(deletion, [other_deletion], intersection_threshold=0.95)
        assert not outcome.matched

    def test_type_must_agree(self, deletion):
        other = build_variant(SVTYPE.DUP, '1', 1000, pos2=2000, source='other')
        outcome = match_one(deletion, [other], distance_threshold=100)
        assert not outcome.matched

    def test_crosswise_breakends(self):
        main = build_variant(SVTYPE.BND, '3', 5000, '7', 6000)
        other = build_variant(SVTYPE.BND, '7', 6010, '3', 5005, source='other')
        outcome = match_one(main, [other], distance_threshold=10)
        assert outcome.matched_variant == other
        assert (outcome.distance1, outcome.distance2) == (5, 10)
        assert outcome.overlap is None

    def test_closest_candidate_wins(self, deletion):
        far = build_variant(SVTYPE.DEL, '1', 1090, pos2=2000, source='other')
        near = build_variant(SVTYPE.DEL, '1', 1010, pos2=2000, source='other')
        outcome = match_one(deletion, [far, near], distance_threshold=100)
        assert outcome.matched_variant == near

    def test_largest_overlap_wins(self, deletion):
        smaller = build_variant(SVTYPE.DEL, '1', 1000, pos2=1900, source='other')
        larger = build_variant(SVTYPE.DEL, '1', 1000, pos2=1950, source='other')
        outcome = match_one(deletion, [smaller, larger], intersection_threshold=0.5)
        assert outcome.matched_variant == larger

    def test_tie_earliest_position_wins(self, deletion):
        later = build_variant(SVTYPE.DEL, '1', 1010, pos2=2010, source='other')
        earlier = build_variant(SVTYPE.DEL, '1', 990, pos2=1990, source='other')
        outcome = match_one(deletion, [later, earlier], distance_threshold=100)
        assert outcome.matched_variant == earlier

    def test_tie_input_order_wins(self, deletion):
        first = build_variant(SVTYPE.DEL, '1', 1010, pos2=2010, source='other', id='first')
        second = build_variant(SVTYPE.DEL, '1', 1010, pos2=2010, source='other', id='second')
        outcome = match_one(deletion, [first, second], distance_threshold=100)
        assert outcome.matched_variant.id == 'first'

    def test_distance_tie_ignores_overlap(self, deletion):
        later = build_variant(SVTYPE.DEL, '1', 1010, pos2=2030, source='other', id='later')
        earlier = build_variant(SVTYPE.DEL, '1', 990, pos2=1970, source='other', id='earlier')
        outcome = match_one(deletion, [later, earlier], distance_threshold=100)
        assert outcome.matched_variant.id == 'earlier'

    def test_overlap_tie_ignores_distance(self, deletion):
        close = build_variant(SVTYPE.DEL, '1', 1100, pos2=1900, source='other', id='close')
        far = build_variant(SVTYPE.DEL, '1', 900, pos2=1880, source='other', id='far')
        outcome = match_one(deletion, [close, far], intersection_threshold=0.4)
        assert outcome.matched_variant.id == 'far'
        assert outcome.overlap == pytest.approx(0.8)

    def test_tiny_overlap_threshold(self, deletion):
        other = build_variant(SVTYPE.DEL, '1', 1000, pos2=2000, source='other')
        outcome = match_one(deletion, [other], intersection_threshold=1e-310)
        assert outcome.matched_variant == other

    def test_one_to_one(self):
        first = build_variant(SVTYPE.DEL, '1', 1000, pos2=2000)
        second = build_variant(SVTYPE.DEL, '1', 1005, pos2=2005)
        other = build_variant(SVTYPE.DEL, '1', 1002, pos2=2002, source='other')
        config = ComparisonConfig(distance_threshold=100)
        outcomes = match_variants([first, second], [other], config)
        assert outcomes[0].matched_variant == other
        assert not outcomes[1].matched

    def test_greedy_in_main_order(self):
        first = build_variant(SVTYPE.DEL, '1', 1000, pos2=2000)
        second = build_variant(SVTYPE.DEL, '1', 1005, pos2=2005)
        near_second = build_variant(SVTYPE.DEL, '1', 1004, pos2=2004, source='other')
        near_first = build_variant(SVTYPE.DEL, '1', 1040, pos2=2040, source='other')
        outcomes = match_variants(
            [first, second], [near_second, near_first], ComparisonConfig(distance_threshold=100)
        )
        assert outcomes[0].matched_variant == near_second
        assert outcomes[1].matched_variant == near_first

    def test_empty_other_set(self, deletion):
        outcomes = match_variants([deletion], [], ComparisonConfig(distance_threshold=100), 'other')
        assert len(outcomes) == 1
        assert not outcomes[0].matched
        assert outcomes[0].other_source == 'other'

    def test_empty_main_set(self, other_deletion):
        assert match_variants([], [other_deletion], ComparisonConfig(distance_threshold=100)) == []

    def test_no_criteria_matches_within_bucket(self, deletion):
        far = build_variant(SVTYPE.DEL, '1', 500000, pos2=600000, source='other')
        elsewhere = build_variant(SVTYPE.DEL, '2', 1000, pos2=2000, source='other')
        outcome = match_one(deletion, [elsewhere, far])
        assert outcome.matched_variant == far

    def test_outcomes_follow_main_order(self):
        main = [build_variant(SVTYPE.DEL, '1', s, pos2=s + 100) for s in [5000, 100, 3000]]
        outcomes = match_variants(main, [], ComparisonConfig())
        assert [outcome.main_variant for outcome in outcomes] == main

    def test_reflexive(self):
        rand = random.Random(11)
        variants = list({v.key(): v for v in random_variants(rand, 200, 'main')}.values())
        config = ComparisonConfig(distance_threshold=100)
        outcomes = match_variants(variants, list(variants), config)
        for variant, outcome in zip(variants, outcomes):
            assert outcome.matched_variant == variant
            assert outcome.distance == 0
            if variant.is_interval:
                assert outcome.overlap == 1.0

    def test_no_variant_matched_twice(self):
        rand = random.Random(3)
        main = random_variants(rand, 300, 'main', chroms=('1',))
        other = random_variants(rand, 300, 'other', chroms=('1',))
        outcomes = match_variants(main, other, ComparisonConfig(distance_threshold=2000))
        matched = [id(o.matched_variant) for o in outcomes if o.matched]
        assert matched
        assert len(matched) == len(set(matched))

    @pytest.mark.parametrize(
        'config',
        [
            ComparisonConfig(distance_threshold=500),
            ComparisonConfig(intersection_threshold=0.5),
            ComparisonConfig(intersection_threshold=0.2, minimal_proportion=0.5),
            ComparisonConfig(distance_threshold=1500, intersection_threshold=0.7),
            ComparisonConfig(intersection_threshold=0.0),
            ComparisonConfig(),
        ],
    )
    def test_windowed_search_agrees_with_full_scan(self, config):
        rand = random.Random(5)
        main = random_variants(rand, 150, 'main')
        other = random_variants(rand, 150, 'other')
        outcomes = match_variants(main, other, config)
        expected = naive_match(main, other, config)
        assert [o.matched_variant for o in outcomes] == [
            other[index] if index is not None else None for index in expected
        ]
