from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .constants import COLUMNS, MATCH_COLUMNS, STATS_COLUMNS, VARIANT_COLUMNS
from .util import logger, output_tabbed_file
from .variant import MatchOutcome, StructuralVariant


@dataclass(frozen=True)
class ReportRow:
    """
    a main variant together with its match outcome against every other source
    """

    variant: StructuralVariant
    outcomes: Mapping[str, MatchOutcome]
    filter_comment: Optional[str] = None

    @property
    def excluded(self) -> bool:
        return self.filter_comment is not None

    def flatten(self, sources: Optional[Sequence[str]] = None) -> Dict:
        row = self.variant.flatten()
        row[COLUMNS.filter_comment] = self.filter_comment
        for source in sources if sources is not None else self.outcomes:
            outcome = self.outcomes[source]
            matched = outcome.matched_variant
            row[f'{source}_{COLUMNS.match}'] = str(matched) if matched is not None else None
            row[f'{source}_{COLUMNS.match_id}'] = matched.id if matched is not None else None
            row[f'{source}_{COLUMNS.distance}'] = outcome.distance
            row[f'{source}_{COLUMNS.overlap}'] = outcome.overlap
        return row


@dataclass(frozen=True)
class ComparisonReport:
    sources: Tuple[str, ...]
    rows: Tuple[ReportRow, ...] = field(default_factory=tuple)

    def __len__(self):
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def header(self) -> List[str]:
        header = VARIANT_COLUMNS + [COLUMNS.filter_comment]
        for source in self.sources:
            header.extend([f'{source}_{col}' for col in MATCH_COLUMNS])
        return header

    def match_counts(self) -> Dict[str, int]:
        return {
            source: sum([1 for row in self.rows if row.outcomes[source].matched])
            for source in self.sources
        }


def assemble(
    main_variants: Sequence[StructuralVariant],
    outcomes_by_source: Mapping[str, Iterable[MatchOutcome]],
    filter_comments: Optional[Mapping[int, str]] = None,
) -> ComparisonReport:
    """
    merge the outcomes of each comparison into a single row per main variant

    Args:
        main_variants: all main variants, rows follow this order
        outcomes_by_source: the outcomes of comparing (some of) the main variants against each other source
        filter_comments: reason a main variant was excluded from comparison, keyed by its position in main_variants

    Returns:
        the report. Main variants without an outcome for a source are reported as unmatched for it
    """
    filter_comments = filter_comments or {}
    outcome_lookup: Dict[str, Dict[int, MatchOutcome]] = {}
    for source, outcomes in outcomes_by_source.items():
        outcome_lookup[source] = {id(outcome.main_variant): outcome for outcome in outcomes}

    rows = []
    for position, variant in enumerate(main_variants):
        outcomes = {}
        for source, lookup in outcome_lookup.items():
            outcome = lookup.get(id(variant))
            if outcome is None or position in filter_comments:
                outcome = MatchOutcome(variant, source)
            outcomes[source] = outcome
        rows.append(ReportRow(variant, outcomes, filter_comments.get(position)))
    return ComparisonReport(tuple(outcome_lookup), tuple(rows))


def write_report(report: ComparisonReport, filename: str):
    for source, count in report.match_counts().items():
        logger.info(f'{count} of {len(report)} main variants matched in {source}')
    output_tabbed_file(
        [row.flatten(report.sources) for row in report.rows], filename, header=report.header()
    )


def write_statistics(tables: Iterable, filename: str):
    rows = []
    for table in tables:
        rows.extend(table.rows())
    output_tabbed_file(rows, filename, header=STATS_COLUMNS)
