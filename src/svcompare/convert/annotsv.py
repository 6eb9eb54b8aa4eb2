import re
from typing import List

import pandas as pd

from ..constants import SVTYPE
from ..util import soft_cast
from ..variant import StructuralVariant, normalize_chromosome
from .constants import choose_svtype
from .vcf import is_bnd_alt, parse_bnd_alt, parse_filter, parse_info

FULL_ANNOTATION = 'full'


def convert_row(row: dict, source: str, prefer_base_svtype: bool = False) -> StructuralVariant:
    info = parse_info(row.get('INFO'))
    event_type = choose_svtype(row['SV_type'], info.get('SVTYPE2'), prefer_base_svtype)
    chrom1 = normalize_chromosome(row['SV_chrom'])
    pos1 = soft_cast(row['SV_start'], int)
    alt = row.get('ALT')
    if is_bnd_alt(alt):
        chrom2, pos2 = parse_bnd_alt(alt)
        chrom2 = normalize_chromosome(chrom2)
    else:
        chrom2 = chrom1
        pos2 = soft_cast(row['SV_end'], int)
    if pos1 is None or pos2 is None:
        raise ValueError('AnnotSV record is missing a position', row)

    length = None
    if event_type != SVTYPE.BND and chrom1 == chrom2:
        pos1, pos2 = min(pos1, pos2), max(pos1, pos2)
        size = soft_cast(row.get('SV_length'), int)
        length = abs(size) if size is not None else pos2 - pos1
        if event_type == SVTYPE.INS and pos1 == pos2 and length:
            pos2 = pos1 + length
    genes = [g.strip() for g in re.split(r'[;,/]', str(row.get('Gene_name') or '')) if g.strip()]
    return StructuralVariant(
        source=source,
        event_type=event_type,
        chrom1=chrom1,
        pos1=pos1,
        chrom2=chrom2,
        pos2=pos2,
        length=length,
        genes=frozenset(genes),
        filter_pass=parse_filter(row.get('FILTER')),
        id=str(row.get('AnnotSV_ID') or row.get('ID') or ''),
    )


def convert_file(
    input_file: str, source: str, filter_pass: bool = False, prefer_base_svtype: bool = False
) -> List[StructuralVariant]:
    """
    read an AnnotSV table. Only the full annotation rows (one per variant) are used, split rows
    (one per overlapped gene) are skipped
    """
    df = pd.read_csv(input_file, sep='\t', dtype=str, comment=None, index_col=False)
    for col in ['SV_chrom', 'SV_start', 'SV_end', 'SV_type']:
        if col not in df.columns:
            raise KeyError(f'Missing required column: {col}')
    if 'Annotation_mode' in df.columns:
        df = df[df['Annotation_mode'] == FULL_ANNOTATION]
    df = df.where(df.notnull(), None)
    variants = []
    for row in df.to_dict('records'):
        variant = convert_row(row, source, prefer_base_svtype)
        if filter_pass and variant.filter_pass is not True:
            continue
        variants.append(variant)
    return variants
