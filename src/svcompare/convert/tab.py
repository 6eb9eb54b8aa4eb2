from typing import List, Optional

import pandas as pd

from ..constants import COLUMNS, GENE_DELIM, VARIANT_COLUMNS, resolve_svtype
from ..util import cast_boolean, cast_null, logger
from ..variant import StructuralVariant, normalize_chromosome

REQUIRED_COLUMNS = [
    COLUMNS.event_type,
    COLUMNS.chrom1,
    COLUMNS.pos1,
    COLUMNS.chrom2,
    COLUMNS.pos2,
]

NULL_VALUES = ['None', 'none', 'N/A', 'n/a', 'null', 'NULL', 'Null', 'nan', '<NA>', 'NaN', '']


def _soft_boolean(value) -> Optional[bool]:
    if value is None:
        return None
    try:
        return cast_null(value)
    except TypeError:
        return cast_boolean(value)


def convert_file(
    input_file: str, source: Optional[str] = None, filter_pass: bool = False
) -> List[StructuralVariant]:
    """
    reads a file in the normalized tab format (as written by svcompare convert)

    Args:
        input_file: path to the input file
        source: overwrite the source of all records. Required when the file has no source column
        filter_pass: only keep records which passed the caller's filters
    """
    try:
        df = pd.read_csv(
            input_file,
            dtype={
                **{col: str for col in VARIANT_COLUMNS},
                COLUMNS.pos1: pd.Int64Dtype(),
                COLUMNS.pos2: pd.Int64Dtype(),
                COLUMNS.length: pd.Int64Dtype(),
            },
            sep='\t',
            comment='#',
            na_values=NULL_VALUES,
            keep_default_na=False,
        )
        df = df.astype(object).where(pd.notnull(df), None)
    except pd.errors.EmptyDataError:
        return []

    for col in REQUIRED_COLUMNS:
        if col not in df:
            raise KeyError(f'missing required column: {col}')
    if source is not None:
        df[COLUMNS.source] = source
    elif COLUMNS.source not in df:
        raise KeyError(f'missing required column: {COLUMNS.source}')

    variants = []
    for row in df.to_dict('records'):
        genes = row.get(COLUMNS.genes) or ''
        variant = StructuralVariant(
            source=row[COLUMNS.source],
            event_type=resolve_svtype(row[COLUMNS.event_type]),
            chrom1=normalize_chromosome(row[COLUMNS.chrom1]),
            pos1=row[COLUMNS.pos1],
            chrom2=normalize_chromosome(row[COLUMNS.chrom2]),
            pos2=row[COLUMNS.pos2],
            length=row.get(COLUMNS.length),
            genes=frozenset([g for g in genes.split(GENE_DELIM) if g]),
            filter_pass=_soft_boolean(row.get(COLUMNS.filter_pass)),
            id=row.get(COLUMNS.id) or '',
        )
        if filter_pass and variant.filter_pass is not True:
            continue
        variants.append(variant)
    logger.debug(f'read {len(variants)} records from {input_file}')
    return variants
