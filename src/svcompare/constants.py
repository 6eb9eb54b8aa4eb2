"""
module responsible for small utility functions and constants used throughout the svcompare package
"""
import argparse
from typing import List, Optional

from mavis_config.constants import MavisNamespace


def float_fraction(num):
    """
    cast input to a float

    Args:
        num: input to cast

    Returns:
        float

    Raises:
        TypeError: if the input cannot be cast to a float or the number is not between 0 and 1
    """
    try:
        num = float(num)
    except ValueError:
        raise argparse.ArgumentTypeError('Must be a value between 0 and 1')
    if num < 0 or num > 1:
        raise argparse.ArgumentTypeError('Must be a value between 0 and 1')
    return num


def positive_int(num):
    """
    cast input to a non-negative integer
    """
    try:
        num = int(num)
    except ValueError:
        raise argparse.ArgumentTypeError('Must be a non-negative integer')
    if num < 0:
        raise argparse.ArgumentTypeError('Must be a non-negative integer')
    return num


class SVTYPE(MavisNamespace):
    """
    holds controlled vocabulary for acceptable structural variant classifications

    Attributes:
        BND: breakend, a junction between two positions which may be on different chromosomes
        CNV: copy number variant
        DEL: deletion
        INS: insertion
        DUP: duplication
        INV: inversion
        UNK: unknown or unrecognized classification
    """

    BND: str = 'BND'
    CNV: str = 'CNV'
    DEL: str = 'DEL'
    INS: str = 'INS'
    DUP: str = 'DUP'
    INV: str = 'INV'
    UNK: str = 'UNK'


SVTYPE_ORDER: List[str] = [
    SVTYPE.BND,
    SVTYPE.CNV,
    SVTYPE.DEL,
    SVTYPE.INS,
    SVTYPE.DUP,
    SVTYPE.INV,
    SVTYPE.UNK,
]
"""all structural variant types, in reporting order"""


def resolve_svtype(value: Optional[str]) -> str:
    """
    Map a type tag onto the vocabulary, anything unrecognized becomes UNK

    Example:
        >>> resolve_svtype('del')
        'DEL'
        >>> resolve_svtype('complex')
        'UNK'
    """
    if value is None:
        return SVTYPE.UNK
    value = str(value).strip().upper()
    if value in SVTYPE_ORDER:
        return value
    return SVTYPE.UNK


class SWEEP(MavisNamespace):
    """
    holds controlled vocabulary for the criterion varied by a statistics sweep

    Attributes:
        DISTANCE: the breakpoint distance threshold is varied
        INTERSECTION: the reciprocal overlap threshold is varied
    """

    DISTANCE: str = 'distance'
    INTERSECTION: str = 'intersection'


class SUBCOMMAND(MavisNamespace):
    """
    holds controlled vocabulary for the command line sub-programs
    """

    COMPARE: str = 'compare'
    CONVERT: str = 'convert'


class COLUMNS(MavisNamespace):
    """
    Column names for i/o files used throughout the comparison

    Attributes:
        id: identifier of the record in its source
        source: name of the input source the variant was read from
        event_type: the structural variant type tag
        chrom1: chromosome of the first breakpoint
        pos1: position of the first breakpoint
        chrom2: chromosome of the second breakpoint
        pos2: position of the second breakpoint
        length: size of the event (None for breakends)
        genes: annotated genes overlapping the event
        filter_pass: whether the caller marked the record as passing its filters
        filter_comment: reason a main variant was excluded from matching
        match: description of the matched variant
        match_id: identifier of the matched variant
        distance: summed breakpoint distance to the matched variant
        overlap: reciprocal overlap proportion with the matched variant
        main_source: source of the main variant set
        other_source: source of the compared variant set
        sweep: criterion varied by the statistics sweep
        threshold: threshold value for a sweep bucket
        match_count: number of main variants matched at a threshold
        total_count: number of main variants considered
        match_rate: match_count / total_count
    """

    id: str = 'id'
    source: str = 'source'
    event_type: str = 'event_type'
    chrom1: str = 'chrom1'
    pos1: str = 'pos1'
    chrom2: str = 'chrom2'
    pos2: str = 'pos2'
    length: str = 'length'
    genes: str = 'genes'
    filter_pass: str = 'filter_pass'
    filter_comment: str = 'filter_comment'
    match: str = 'match'
    match_id: str = 'match_id'
    distance: str = 'distance'
    overlap: str = 'overlap'
    main_source: str = 'main_source'
    other_source: str = 'other_source'
    sweep: str = 'sweep'
    threshold: str = 'threshold'
    match_count: str = 'match_count'
    total_count: str = 'total_count'
    match_rate: str = 'match_rate'


VARIANT_COLUMNS: List[str] = [
    COLUMNS.id,
    COLUMNS.source,
    COLUMNS.event_type,
    COLUMNS.chrom1,
    COLUMNS.pos1,
    COLUMNS.chrom2,
    COLUMNS.pos2,
    COLUMNS.length,
    COLUMNS.genes,
    COLUMNS.filter_pass,
]
"""columns of the normalized tab format, in output order"""

MATCH_COLUMNS: List[str] = [COLUMNS.match, COLUMNS.match_id, COLUMNS.distance, COLUMNS.overlap]
"""per-source columns appended to the comparison report"""

STATS_COLUMNS: List[str] = [
    COLUMNS.main_source,
    COLUMNS.other_source,
    COLUMNS.sweep,
    COLUMNS.threshold,
    COLUMNS.match_count,
    COLUMNS.total_count,
    COLUMNS.match_rate,
]

GENE_DELIM: str = ';'
