"""
Filters applied to every variant set before comparison: masking of excluded genomic regions and
restriction to a set of variant types
"""
import bisect
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .interval import Interval
from .util import logger
from .variant import ChromosomeRegion, StructuralVariant, normalize_chromosome

REGION_COMMENT_PREFIX = 'overlapped excluded region: '
TYPE_FILTER_COMMENT = 'filtered variant type'


class RegionIndex:
    """
    Lookup of the excluded region (if any) containing a position. Overlapping regions on the same
    chromosome are merged so that a lookup is a single binary search
    """

    def __init__(self, regions: Iterable[ChromosomeRegion]):
        by_chrom: Dict[str, List[ChromosomeRegion]] = {}
        for region in regions:
            by_chrom.setdefault(region.chrom, []).append(region)
        self.starts: Dict[str, List[int]] = {}
        self.regions: Dict[str, List[ChromosomeRegion]] = {}
        for chrom, chrom_regions in by_chrom.items():
            merged = [
                ChromosomeRegion(chrom, itvl.start, itvl.end)
                for itvl in Interval.min_nonoverlapping(*[(r.start, r.end) for r in chrom_regions])
            ]
            self.regions[chrom] = merged
            self.starts[chrom] = [r.start for r in merged]

    def find(self, chrom: str, position: int) -> Optional[ChromosomeRegion]:
        starts = self.starts.get(chrom)
        if not starts:
            return None
        index = bisect.bisect_right(starts, position) - 1
        if index < 0:
            return None
        region = self.regions[chrom][index]
        return region if position in region else None

    def __len__(self):
        return sum([len(r) for r in self.regions.values()])


def filter_on_regions(
    variants: List[StructuralVariant], regions: Iterable[ChromosomeRegion]
) -> Tuple[List[StructuralVariant], List[Tuple[StructuralVariant, ChromosomeRegion]]]:
    """
    filter a set of variants based on overlap of either breakpoint with a set of excluded regions

    Args:
        variants: list of variants to be filtered
        regions: regions to filter against

    Returns:
        the variants which passed (in input order) and pairs of the removed variants with the
        region which caused their removal
    """
    index = regions if isinstance(regions, RegionIndex) else RegionIndex(regions)
    if not len(index):
        return list(variants), []
    logger.info(f'filtering from {len(variants)} using overlaps with regions filter')
    failed = []
    passed = []
    for variant in variants:
        region = index.find(variant.chrom1, variant.pos1) or index.find(
            variant.chrom2, variant.pos2
        )
        if region is not None:
            failed.append((variant, region))
        else:
            passed.append(variant)
    logger.info(f'filtered from {len(variants)} down to {len(passed)} (removed {len(failed)})')
    return passed, failed


def filter_on_type(
    variants: List[StructuralVariant], allowed_types: Optional[Set[str]] = None
) -> Tuple[List[StructuralVariant], List[StructuralVariant]]:
    """
    keep only the variants whose type is in the allowed set. With no set all variants are kept

    Returns:
        the variants which passed and those which were removed, both in input order
    """
    if allowed_types is None:
        return list(variants), []
    passed = []
    failed = []
    for variant in variants:
        if variant.event_type in allowed_types:
            passed.append(variant)
        else:
            failed.append(variant)
    if failed:
        logger.info(
            f'filtered from {len(variants)} down to {len(passed)} by variant type (removed {len(failed)})'
        )
    return passed, failed


def read_excluded_regions(filename: str) -> List[ChromosomeRegion]:
    """
    read regions from a bed-like file (chromosome, start, end). Header, comment and malformed lines are skipped
    """
    logger.info(f'loading: {filename}')
    regions = []
    skipped = 0
    with open(filename, 'r') as fh:
        for line_number, line in enumerate(fh, start=1):
            line = line.strip()
            if not line or line.startswith(('#', 'track', 'browser')):
                continue
            fields = line.split('\t') if '\t' in line else line.split()
            try:
                if len(fields) < 3:
                    raise ValueError('expected at least 3 columns')
                regions.append(
                    ChromosomeRegion(
                        normalize_chromosome(fields[0]), int(fields[1]), int(fields[2])
                    )
                )
            except (ValueError, AttributeError) as err:
                skipped += 1
                logger.debug(f'skipping malformed region on line {line_number}: {line!r} ({err})')
    logger.info(f'loaded {len(regions)} excluded regions (skipped {skipped} malformed lines)')
    return regions
