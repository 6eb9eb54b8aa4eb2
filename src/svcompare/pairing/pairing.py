import bisect
import math
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..config import ComparisonConfig
from ..interval import Interval
from ..util import logger
from ..variant import MatchOutcome, StructuralVariant


def breakpoint_distances(main: StructuralVariant, other: StructuralVariant) -> Tuple[int, int]:
    """
    distance between the corresponding breakpoints of two variants. Breakpoints are lined up by
    chromosome so that calls reported from opposite sides of a junction are compared crosswise
    """
    main_first, main_second = main.breakpoints
    other_first, other_second = other.breakpoints
    return abs(main_first - other_first), abs(main_second - other_second)


def overlap_proportion(main: StructuralVariant, other: StructuralVariant) -> Optional[float]:
    """
    reciprocal overlap (intersection over union) of two variants, None unless both describe an interval
    """
    if not main.is_interval or not other.is_interval:
        return None
    return Interval.reciprocal_overlap((main.start, main.end), (other.start, other.end))


def size_proportion(main: StructuralVariant, other: StructuralVariant) -> Optional[float]:
    """
    ratio of the smaller to the larger event size, None when either size is unknown

    Example:
        >>> size_proportion(StructuralVariant('a', 'DUP', '2', 1, '2', 100000, length=100000), StructuralVariant('b', 'DUP', '2', 50, '2', 150, length=100))
        0.001
    """
    if main.length is None or other.length is None:
        return None
    larger = max(main.length, other.length)
    if larger == 0:
        return 1.0
    return min(main.length, other.length) / larger


def equivalent(
    main: StructuralVariant, other: StructuralVariant, config: ComparisonConfig
) -> Optional[Tuple[int, int, Optional[float]]]:
    """
    checks two variants of the same type and chromosomes against every configured criterion

    Returns:
        the breakpoint distances and overlap of the pair if it is acceptable, otherwise None
    """
    distance1, distance2 = breakpoint_distances(main, other)
    if config.distance_threshold is not None and (
        distance1 > config.distance_threshold or distance2 > config.distance_threshold
    ):
        return None
    overlap = overlap_proportion(main, other)
    if (
        config.intersection_threshold is not None
        and overlap is not None
        and overlap < config.intersection_threshold
    ):
        return None
    if config.minimal_proportion is not None:
        proportion = size_proportion(main, other)
        if proportion is not None and proportion < config.minimal_proportion:
            return None
    if config.require_common_genes and not (main.genes & other.genes):
        return None
    return distance1, distance2, overlap


def score(
    config: ComparisonConfig,
    distance1: int,
    distance2: int,
    overlap: Optional[float],
    other: StructuralVariant,
    index: int,
) -> Tuple:
    """
    sort key for an accepted candidate, the lowest key wins. Distance ranks candidates whenever a
    distance threshold is given, otherwise the overlap does. Overlap breaks distance ties only
    when both thresholds are given. Remaining ties go to the candidate with the earliest first
    breakpoint and then the one read first
    """
    overlap_rank = -overlap if overlap is not None else 0
    if config.distance_threshold is not None and config.intersection_threshold is not None:
        return (distance1 + distance2, overlap_rank, other.pos1, index)
    elif config.distance_threshold is not None:
        return (distance1 + distance2, other.pos1, index)
    elif config.intersection_threshold is not None:
        return (overlap_rank, other.pos1, index)
    return (distance1 + distance2, other.pos1, index)


class VariantBucket:
    """
    variants sharing a chromosome pair and type, sorted by their anchor position
    """

    def __init__(self):
        self.anchors: List[int] = []
        self.entries: List[Tuple[int, StructuralVariant]] = []

    def add(self, index: int, variant: StructuralVariant):
        self.entries.append((index, variant))

    def sort(self):
        self.entries.sort(key=lambda entry: (entry[1].anchor, entry[0]))
        self.anchors = [variant.anchor for _, variant in self.entries]

    def window(self, main: StructuralVariant, config: ComparisonConfig) -> Tuple[int, int]:
        """
        the range of entries whose anchor could satisfy the configured positional criteria for
        the given variant. Without a usable positional criterion this is the whole bucket
        """
        low = -math.inf
        high = math.inf
        if config.distance_threshold is not None:
            low = main.anchor - config.distance_threshold
            high = main.anchor + config.distance_threshold
        if (
            config.intersection_threshold is not None
            and config.intersection_threshold > 0
            and main.is_interval
        ):
            reach = (main.end - main.start) / config.intersection_threshold
            # a candidate starting further upstream cannot reach the required overlap
            if math.isfinite(reach):
                low = max(low, math.floor(main.end - reach) - 1)
            high = min(high, main.end)
        start = 0 if low == -math.inf else bisect.bisect_left(self.anchors, low)
        end = len(self.anchors) if high == math.inf else bisect.bisect_right(self.anchors, high)
        return start, end


def bucket_variants(variants: Sequence[StructuralVariant]) -> Dict[Tuple, VariantBucket]:
    buckets: Dict[Tuple, VariantBucket] = {}
    for index, variant in enumerate(variants):
        buckets.setdefault(variant.bucket_key, VariantBucket()).add(index, variant)
    for bucket in buckets.values():
        bucket.sort()
    return buckets


def iter_candidates(
    main: StructuralVariant, buckets: Dict[Tuple, VariantBucket], config: ComparisonConfig
) -> Iterator[Tuple[int, StructuralVariant]]:
    bucket = buckets.get(main.bucket_key)
    if bucket is None:
        return
    start, end = bucket.window(main, config)
    for position in range(start, end):
        yield bucket.entries[position]


def match_variants(
    main_variants: Sequence[StructuralVariant],
    other_variants: Sequence[StructuralVariant],
    config: ComparisonConfig,
    other_source: Optional[str] = None,
) -> List[MatchOutcome]:
    """
    find the best match in another variant set for each of the main variants

    Main variants are visited in input order and each takes the best scoring acceptable candidate
    which has not already been taken, so a variant from the other set is matched at most once

    Args:
        main_variants: the variants to find matches for
        other_variants: the variants to search
        config: the criteria two variants must meet to be considered the same event
        other_source: name of the other set, defaults to the source of its first variant

    Returns:
        one outcome for each main variant, in the same order
    """
    if other_source is None:
        other_source = other_variants[0].source if other_variants else ''
    buckets = bucket_variants(other_variants)
    consumed = set()
    outcomes = []
    comparisons = 0

    for main in main_variants:
        best_key = None
        best = None
        for index, other in iter_candidates(main, buckets, config):
            if index in consumed:
                continue
            comparisons += 1
            accepted = equivalent(main, other, config)
            if accepted is None:
                continue
            distance1, distance2, overlap = accepted
            key = score(config, distance1, distance2, overlap, other, index)
            if best_key is None or key < best_key:
                best_key = key
                best = (index, other, distance1, distance2, overlap)
        if best is None:
            outcomes.append(MatchOutcome(main, other_source))
            continue
        index, other, distance1, distance2, overlap = best
        consumed.add(index)
        outcomes.append(
            MatchOutcome(
                main,
                other_source,
                matched_variant=other,
                distance1=distance1,
                distance2=distance2,
                overlap=overlap,
            )
        )
    logger.debug(
        f'computed {comparisons} comparisons for {len(main_variants)} x {len(other_variants)} variants'
    )
    return outcomes
