"""
The structural variant record shared by every input source, and the small value types built around it
"""
import itertools
import re
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from shortuuid import uuid

from .constants import COLUMNS, GENE_DELIM, SVTYPE, SVTYPE_ORDER
from .error import InvalidVariantError
from .interval import Interval

CHROMOSOME_ALIASES: Dict[str, str] = {'23': 'X', '24': 'Y', '25': 'MT', 'M': 'MT'}
"""Bionano reports sex and mitochondrial contigs by number"""


def normalize_chromosome(name) -> str:
    """
    Example:
        >>> normalize_chromosome('chr1')
        '1'
        >>> normalize_chromosome(23)
        'X'
        >>> normalize_chromosome('chrM')
        'MT'
    """
    name = str(name).strip()
    name = re.sub(r'^chr', '', name, flags=re.IGNORECASE)
    if re.match(r'^\d+\.0+$', name):
        name = name.split('.')[0]
    return CHROMOSOME_ALIASES.get(name.upper(), name)


@dataclass(frozen=True)
class StructuralVariant:
    """
    A single structural variant call after normalization. Two records describing the same event
    compare equal regardless of the identifier they carried in their source file

    Attributes:
        source: name of the input source the call was read from
        event_type: one of :class:`~svcompare.constants.SVTYPE`
        chrom1: chromosome of the first breakpoint
        pos1: position of the first breakpoint
        chrom2: chromosome of the second breakpoint
        pos2: position of the second breakpoint
        length: size of the event, None for breakends or when the source does not give one
        genes: names of annotated genes the event overlaps
        filter_pass: whether the caller marked the record as passing, None if not reported
        id: the record identifier in its source, generated when the source has none
    """

    source: str
    event_type: str
    chrom1: str
    pos1: int
    chrom2: str
    pos2: int
    length: Optional[int] = None
    genes: FrozenSet[str] = frozenset()
    filter_pass: Optional[bool] = None
    id: str = field(default='', compare=False)

    def __post_init__(self):
        if self.event_type not in SVTYPE_ORDER:
            raise InvalidVariantError('unrecognized structural variant type', self.event_type)
        if not self.chrom1 or not self.chrom2:
            raise InvalidVariantError('chromosome names must be non-empty', self.chrom1, self.chrom2)
        object.__setattr__(self, 'pos1', int(self.pos1))
        object.__setattr__(self, 'pos2', int(self.pos2))
        if (
            self.event_type != SVTYPE.BND
            and self.chrom1 == self.chrom2
            and self.pos1 > self.pos2
        ):
            raise InvalidVariantError(
                'first breakpoint cannot be downstream of the second breakpoint', self.pos1, self.pos2
            )
        if self.event_type == SVTYPE.BND:
            object.__setattr__(self, 'length', None)
        elif self.length is not None:
            object.__setattr__(self, 'length', abs(int(self.length)))
        object.__setattr__(self, 'genes', frozenset(self.genes or []))
        if not self.id:
            object.__setattr__(self, 'id', uuid())

    @property
    def is_interval(self) -> bool:
        """True when the event spans a single range on one chromosome"""
        return self.event_type != SVTYPE.BND and self.chrom1 == self.chrom2

    @property
    def start(self) -> int:
        return min(self.pos1, self.pos2) if self.chrom1 == self.chrom2 else self.pos1

    @property
    def end(self) -> int:
        return max(self.pos1, self.pos2) if self.chrom1 == self.chrom2 else self.pos1

    @property
    def interval(self) -> Interval:
        if not self.is_interval:
            raise AttributeError('variant does not describe a single interval', self)
        return Interval(self.start, self.end)

    @property
    def breakpoints(self) -> Tuple[int, int]:
        """
        Positions ordered by chromosome name so that calls which list the same junction from either
        side line up. Breakpoints on a single chromosome are ordered by position
        """
        if self.chrom1 == self.chrom2:
            return (self.start, self.end)
        elif self.chrom1 < self.chrom2:
            return (self.pos1, self.pos2)
        return (self.pos2, self.pos1)

    @property
    def bucket_key(self) -> Tuple[str, str, str]:
        chrom_first, chrom_second = sorted((self.chrom1, self.chrom2))
        return (chrom_first, chrom_second, self.event_type)

    @property
    def anchor(self) -> int:
        return self.breakpoints[0]

    def key(self) -> Tuple:
        """
        the event described by the record, without regard to which side it was reported from
        """
        return self.bucket_key + self.breakpoints

    def __str__(self):
        return f'{self.event_type}:{self.chrom1}:{self.pos1}-{self.chrom2}:{self.pos2}'

    def flatten(self) -> Dict:
        """
        returns the record as a dictionary of column names to simple values for writing
        """
        return {
            COLUMNS.id: self.id,
            COLUMNS.source: self.source,
            COLUMNS.event_type: self.event_type,
            COLUMNS.chrom1: self.chrom1,
            COLUMNS.pos1: self.pos1,
            COLUMNS.chrom2: self.chrom2,
            COLUMNS.pos2: self.pos2,
            COLUMNS.length: self.length,
            COLUMNS.genes: GENE_DELIM.join(sorted(self.genes)),
            COLUMNS.filter_pass: self.filter_pass,
        }


@dataclass(frozen=True)
class ChromosomeRegion:
    """
    A half-open range [start, end) on a chromosome, used to exclude variants from comparison
    """

    chrom: str
    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise AttributeError('region start must be less than its end', self.start, self.end)

    def __contains__(self, position) -> bool:
        return self.start <= position < self.end

    def __str__(self):
        return f'{self.chrom}:{self.start}-{self.end}'


@dataclass(frozen=True)
class MatchOutcome:
    """
    The result of searching another source for a main variant

    Attributes:
        main_variant: the variant that was searched for
        other_source: name of the source that was searched
        matched_variant: the variant assigned as its match, None when there was none
        distance1: distance between the breakpoints on the first chromosome
        distance2: distance between the breakpoints on the second chromosome
        overlap: reciprocal overlap of the two events, when both describe an interval
    """

    main_variant: StructuralVariant
    other_source: str
    matched_variant: Optional[StructuralVariant] = None
    distance1: Optional[int] = None
    distance2: Optional[int] = None
    overlap: Optional[float] = None

    @property
    def matched(self) -> bool:
        return self.matched_variant is not None

    @property
    def distance(self) -> Optional[int]:
        if self.distance1 is None or self.distance2 is None:
            return None
        return self.distance1 + self.distance2


def deduplicate(variants: Iterable[StructuralVariant]) -> List[StructuralVariant]:
    """
    collapse records describing the same event, keeping the first one seen and the genes of all of them
    """
    result: Dict[Tuple, StructuralVariant] = {}
    for variant in variants:
        key = (variant.source,) + variant.key()
        if key in result:
            first = result[key]
            if not variant.genes <= first.genes:
                result[key] = replace(first, genes=first.genes | variant.genes, id=first.id)
        else:
            result[key] = variant
    return list(result.values())


def summarize_variants(variants: Iterable[StructuralVariant]) -> Dict[str, int]:
    """
    count variants by type

    Example:
        >>> summarize_variants([])
        {}
    """
    counts = {}
    for event_type, group in itertools.groupby(
        sorted(variants, key=lambda v: SVTYPE_ORDER.index(v.event_type)),
        key=lambda v: v.event_type,
    ):
        counts[event_type] = len(list(group))
    return counts
