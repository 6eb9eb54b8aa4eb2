import os
from concurrent.futures import Executor, ProcessPoolExecutor
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import ComparisonConfig
from ..convert import SUPPORTED_TOOL, convert_tool_output, source_name
from ..error import NoMainInputError
from ..filters import (
    REGION_COMMENT_PREFIX,
    TYPE_FILTER_COMMENT,
    RegionIndex,
    filter_on_regions,
    filter_on_type,
)
from ..report import ComparisonReport, assemble, write_report, write_statistics
from ..util import logger
from ..variant import MatchOutcome, StructuralVariant
from .pairing import match_variants
from .stats import SweepTable, sweep


@dataclass(frozen=True)
class InputFile:
    """
    a variant file given on the command line

    Attributes:
        path: path to the file
        file_type: one of :class:`~svcompare.convert.constants.SUPPORTED_TOOL`
        flavor: the caller which produced a VCF (see :class:`~svcompare.convert.constants.VCF_FLAVOR`)
    """

    path: str
    file_type: str
    flavor: Optional[str] = None

    @property
    def source(self) -> str:
        return source_name(self.file_type, self.path, self.flavor)


def resolve_main_input(
    input_files: Sequence[InputFile], main_input: Optional[str] = None
) -> Tuple[InputFile, List[InputFile]]:
    """
    pick the file all others are compared against. Defaults to the (first) Bionano input

    Raises:
        NoMainInputError: if there is no Bionano input and no main input was given, or the given
            main input is not one of the input files
    """
    main_file = None
    if main_input is None:
        for input_file in input_files:
            if input_file.file_type == SUPPORTED_TOOL.BIONANO:
                main_file = input_file
                break
        if main_file is None:
            raise NoMainInputError(
                'no main input given and no Bionano input to use as the main input'
            )
    else:
        for input_file in input_files:
            if os.path.abspath(input_file.path) == os.path.abspath(main_input):
                main_file = input_file
                break
        if main_file is None:
            raise NoMainInputError('main input is not one of the input files', main_input)
    return main_file, [f for f in input_files if f is not main_file]


def filter_variants(
    variants: Sequence[StructuralVariant],
    config: ComparisonConfig,
    region_index: Optional[RegionIndex] = None,
) -> Tuple[List[StructuralVariant], Dict[int, str]]:
    """
    apply the region and type filters

    Returns:
        the variants kept (in input order) and a comment for each removed variant, keyed by its
        position in the input
    """
    if region_index is None:
        region_index = RegionIndex(config.excluded_regions)
    positions = {id(variant): position for position, variant in enumerate(variants)}
    comments: Dict[int, str] = {}
    passed, failed = filter_on_regions(list(variants), region_index)
    for variant, region in failed:
        comments[positions[id(variant)]] = REGION_COMMENT_PREFIX + str(region)
    passed, removed = filter_on_type(passed, config.variant_types)
    for variant in removed:
        comments[positions[id(variant)]] = TYPE_FILTER_COMMENT
    return passed, comments


def _match_all(
    main_variants: List[StructuralVariant],
    other_variants: Dict[str, List[StructuralVariant]],
    config: ComparisonConfig,
    executor: Optional[Executor] = None,
) -> Dict[str, List[MatchOutcome]]:
    outcomes_by_source = {}
    if executor is not None:
        futures = {
            source: executor.submit(match_variants, main_variants, variants, config, source)
            for source, variants in other_variants.items()
        }
        for source, future in futures.items():
            # results from worker processes hold copies of the main variants
            outcomes_by_source[source] = [
                replace(outcome, main_variant=variant)
                for outcome, variant in zip(future.result(), main_variants)
            ]
    else:
        for source, variants in other_variants.items():
            outcomes_by_source[source] = match_variants(main_variants, variants, config, source)
    for source, outcomes in outcomes_by_source.items():
        matched = sum([1 for outcome in outcomes if outcome.matched])
        logger.info(f'matched {matched} of {len(outcomes)} main variants in {source}')
    return outcomes_by_source


def compare(
    main_variants: Sequence[StructuralVariant],
    other_variants: Dict[str, Sequence[StructuralVariant]],
    config: ComparisonConfig,
    main_source: Optional[str] = None,
    statistics: bool = True,
) -> Tuple[ComparisonReport, List[SweepTable]]:
    """
    compare the main variants against each of the other variant sets

    Args:
        main_variants: the variants to find matches for
        other_variants: the variant sets to search, by source name
        config: the comparison criteria
        main_source: name of the main source, defaults to the source of the first main variant
        statistics: compute the threshold sweeps requested by the config

    Returns:
        the report with a row for every main variant (in input order) and the statistics tables
    """
    if main_source is None:
        main_source = main_variants[0].source if main_variants else ''
    if not config.has_positional_criterion:
        logger.warning(
            'no distance or overlap threshold given. Variants are matched on type and chromosomes only'
        )
    region_index = RegionIndex(config.excluded_regions)
    filtered_main, comments = filter_variants(main_variants, config, region_index)
    filtered_others = {}
    for source, variants in other_variants.items():
        filtered_others[source], _ = filter_variants(variants, config, region_index)
        if not filtered_others[source]:
            logger.warning(f'no variants to compare against for {source}')
    logger.info(
        f'comparing {len(filtered_main)} of {len(main_variants)} {main_source} variants against {len(filtered_others)} sources'
    )

    executor = None
    if config.concurrency_limit > 1:
        executor = ProcessPoolExecutor(max_workers=config.concurrency_limit)
    try:
        outcomes_by_source = _match_all(filtered_main, filtered_others, config, executor)
        report = assemble(main_variants, outcomes_by_source, comments)
        tables: List[SweepTable] = []
        if statistics:
            for source, variants in filtered_others.items():
                tables.extend(
                    sweep(
                        filtered_main,
                        variants,
                        config,
                        main_source=main_source,
                        other_source=source,
                        executor=executor,
                    )
                )
    finally:
        if executor is not None:
            executor.shutdown()
    return report, tables


def load_input(
    input_file: InputFile, filter_pass: bool = False, prefer_base_svtype: bool = False
) -> List[StructuralVariant]:
    return convert_tool_output(
        [input_file.path],
        input_file.file_type,
        source=input_file.source,
        filter_pass=filter_pass,
        prefer_base_svtype=prefer_base_svtype,
    )


def main(
    input_files: List[InputFile],
    output: str,
    config: ComparisonConfig,
    main_input: Optional[str] = None,
    statistics_output: Optional[str] = None,
    filter_pass: bool = False,
    prefer_base_svtype: bool = False,
):
    """
    Args:
        input_files: the variant files to compare
        output: path to the comparison report to write
        config: the comparison criteria
        main_input: path of the input file to compare the others against
        statistics_output: path to write the threshold statistics to
        filter_pass: only read records the caller marked as passing
        prefer_base_svtype: use the base type of records with a secondary type
    """
    main_file, other_files = resolve_main_input(input_files, main_input)
    logger.info(f'main input: {main_file.path} ({main_file.source})')

    main_variants = load_input(main_file, filter_pass, prefer_base_svtype)
    other_variants: Dict[str, List[StructuralVariant]] = {}
    for input_file in other_files:
        if input_file.source in other_variants or input_file.source == main_file.source:
            raise KeyError('input files must have unique source names', input_file.source)
        other_variants[input_file.source] = load_input(input_file, filter_pass, prefer_base_svtype)

    compute_statistics = bool(
        statistics_output and (config.distance_sweep_values or config.intersection_sweep_values)
    )
    if statistics_output and not compute_statistics:
        logger.warning('statistics output given without any thresholds. No statistics computed')

    report, tables = compare(
        main_variants,
        other_variants,
        config,
        main_source=main_file.source,
        statistics=compute_statistics,
    )
    write_report(report, output)
    if compute_statistics:
        write_statistics(tables, statistics_output)
    return report, tables
