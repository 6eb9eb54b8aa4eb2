"""
Match rates of a main variant set against another set over a range of thresholds
"""
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import ComparisonConfig
from ..constants import COLUMNS, SWEEP
from ..util import logger
from ..variant import StructuralVariant
from .pairing import match_variants


@dataclass(frozen=True)
class StatsBucket:
    threshold: float
    match_count: int
    total_count: int

    @property
    def match_rate(self) -> float:
        if not self.total_count:
            return 0.0
        return self.match_count / self.total_count


@dataclass(frozen=True)
class SweepTable:
    """
    the statistics for one criterion varied over a list of thresholds for a pair of sources
    """

    main_source: str
    other_source: str
    sweep: str
    buckets: Tuple[StatsBucket, ...]

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.main_source, self.other_source, self.sweep)

    def rows(self) -> List[Dict]:
        return [
            {
                COLUMNS.main_source: self.main_source,
                COLUMNS.other_source: self.other_source,
                COLUMNS.sweep: self.sweep,
                COLUMNS.threshold: bucket.threshold,
                COLUMNS.match_count: bucket.match_count,
                COLUMNS.total_count: bucket.total_count,
                COLUMNS.match_rate: bucket.match_rate,
            }
            for bucket in self.buckets
        ]


def sweep_config(config: ComparisonConfig, sweep: str, threshold) -> ComparisonConfig:
    """
    the config for a single sweep run: the swept criterion is the only positional criterion, all
    other criteria are held from the base config
    """
    if sweep == SWEEP.DISTANCE:
        return config.with_criteria(distance_threshold=threshold, intersection_threshold=None)
    elif sweep == SWEEP.INTERSECTION:
        return config.with_criteria(distance_threshold=None, intersection_threshold=threshold)
    raise ValueError('unsupported sweep', sweep)


def count_matches(
    main_variants: Sequence[StructuralVariant],
    other_variants: Sequence[StructuralVariant],
    config: ComparisonConfig,
) -> int:
    outcomes = match_variants(main_variants, other_variants, config)
    return sum([1 for outcome in outcomes if outcome.matched])


def sweep_threshold(
    main_variants: Sequence[StructuralVariant],
    other_variants: Sequence[StructuralVariant],
    config: ComparisonConfig,
    sweep: str,
    thresholds: Iterable,
    main_source: Optional[str] = None,
    other_source: Optional[str] = None,
    executor: Optional[Executor] = None,
) -> SweepTable:
    """
    match the two sets once per threshold, counting the matched main variants

    Args:
        sweep: the criterion to vary (see :class:`~svcompare.constants.SWEEP`)
        thresholds: values of the criterion, buckets are reported in this order
        executor: pool to run the independent threshold runs in, runs serially when not given
    """
    thresholds = list(thresholds)
    if main_source is None:
        main_source = main_variants[0].source if main_variants else ''
    if other_source is None:
        other_source = other_variants[0].source if other_variants else ''
    configs = [sweep_config(config, sweep, threshold) for threshold in thresholds]
    logger.info(
        f'computing {sweep} statistics for {main_source} vs {other_source} over {len(thresholds)} thresholds'
    )
    if executor is not None:
        futures = [
            executor.submit(count_matches, main_variants, other_variants, threshold_config)
            for threshold_config in configs
        ]
        counts = [future.result() for future in futures]
    else:
        counts = [
            count_matches(main_variants, other_variants, threshold_config)
            for threshold_config in configs
        ]
    buckets = tuple(
        StatsBucket(threshold, count, len(main_variants))
        for threshold, count in zip(thresholds, counts)
    )
    return SweepTable(main_source, other_source, sweep, buckets)


def sweep(
    main_variants: Sequence[StructuralVariant],
    other_variants: Sequence[StructuralVariant],
    config: ComparisonConfig,
    main_source: Optional[str] = None,
    other_source: Optional[str] = None,
    executor: Optional[Executor] = None,
) -> List[SweepTable]:
    """
    compute the distance and overlap statistics tables requested by the config. A sweep with no
    thresholds is not reported
    """
    tables = []
    for sweep_type, thresholds in [
        (SWEEP.DISTANCE, config.distance_sweep_values),
        (SWEEP.INTERSECTION, config.intersection_sweep_values),
    ]:
        if not thresholds:
            continue
        tables.append(
            sweep_threshold(
                main_variants,
                other_variants,
                config,
                sweep_type,
                thresholds,
                main_source=main_source,
                other_source=other_source,
                executor=executor,
            )
        )
    return tables
