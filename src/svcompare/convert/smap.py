"""
Reader for the structural variant maps (smap) produced by the Bionano Solve/Access optical mapping pipelines
"""
import re
from typing import List, Optional

import pandas as pd

from ..constants import SVTYPE
from ..util import logger, soft_cast
from ..variant import StructuralVariant, normalize_chromosome
from .constants import map_bionano_svtype

HEADER_PREFIX = '#h'
GENE_COLUMNS = ['OverlapGenes', 'Gene', 'Genes']


def read_header(input_file: str) -> List[str]:
    with open(input_file, 'r') as fh:
        for line in fh:
            if line.startswith(HEADER_PREFIX):
                return [c for c in re.split(r'[\t,]', line[len(HEADER_PREFIX):].strip()) if c]
    raise KeyError(f'Missing the {HEADER_PREFIX} header line', input_file)


def _delimiter(input_file: str) -> str:
    with open(input_file, 'r') as fh:
        for line in fh:
            if line.startswith(HEADER_PREFIX):
                return '\t' if '\t' in line else ','
    return '\t'


def convert_row(row: dict, source: str) -> StructuralVariant:
    event_type = map_bionano_svtype(row['Type'])
    chrom1 = normalize_chromosome(row['RefcontigID1'])
    chrom2 = normalize_chromosome(row['RefcontigID2'])
    pos1 = soft_cast(row['RefStartPos'], int)
    pos2 = soft_cast(row['RefEndPos'], int)
    if pos1 is None or pos2 is None:
        raise ValueError('smap record is missing a reference position', row)
    length: Optional[int] = None
    if event_type != SVTYPE.BND and chrom1 == chrom2:
        pos1, pos2 = min(pos1, pos2), max(pos1, pos2)
        size = soft_cast(row.get('SVsize'), int)
        length = abs(size) if size is not None and size >= 0 else pos2 - pos1
    genes = []
    for column in GENE_COLUMNS:
        if row.get(column):
            genes.extend([g for g in re.split(r'[;,]', str(row[column])) if g.strip() and g != '-'])
    return StructuralVariant(
        source=source,
        event_type=event_type,
        chrom1=chrom1,
        pos1=pos1,
        chrom2=chrom2,
        pos2=pos2,
        length=length,
        genes=frozenset([g.strip() for g in genes]),
        id=str(row.get('SmapEntryID') or ''),
    )


def convert_file(input_file: str, source: str) -> List[StructuralVariant]:
    """
    read a Bionano smap file

    The column names are given by the line starting with #h, all other comment lines are skipped
    """
    header = read_header(input_file)
    for col in ['RefcontigID1', 'RefcontigID2', 'RefStartPos', 'RefEndPos', 'Type']:
        if col not in header:
            raise KeyError(f'Missing required column: {col}')
    df = pd.read_csv(
        input_file,
        sep=_delimiter(input_file),
        comment='#',
        header=None,
        names=header,
        dtype=str,
        index_col=False,
    )
    df = df.where(df.notnull(), None)
    variants = [convert_row(row, source) for row in df.to_dict('records')]
    logger.debug(f'read {len(variants)} records from {input_file}')
    return variants
