import gzip
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pandas as pd

from ..constants import SVTYPE
from ..error import UnsupportedFormatError
from ..util import logger
from ..variant import StructuralVariant, normalize_chromosome
from .constants import choose_svtype

PANDAS_DEFAULT_NA_VALUES = [
    '-1.#IND',
    '1.#QNAN',
    '1.#IND',
    '-1.#QNAN',
    '#N/A',
    'N/A',
    'NA',
    '#NA',
    'NULL',
    'NaN',
    '-NaN',
    'nan',
    '-nan',
]

GENE_INFO_FIELDS = ['GENES', 'GENE', 'Gene_name']


@dataclass
class VcfRecordType:
    id: Optional[str]
    pos: int
    chrom: str
    alts: List[Optional[str]]
    info: Dict
    ref: Optional[str]
    filter: Optional[str] = None

    @property
    def stop(self) -> int:
        return self.info.get('END', self.pos)


def parse_bnd_alt(alt: str) -> Tuple[str, int]:
    """
    parses the mate position from the alt statement of a breakend record (vcf 4.2)

    r = reference base/seq
    u = untemplated sequence/alternate sequence
    p = chromosome:position

    | alt format   |
    | ------------ |
    | ru[p[        |
    | [p[ur        |
    | ]p]ur        |
    | ru]p]        |

    Example:
        >>> parse_bnd_alt('G]17:198982]')
        ('17', 198982)
    """
    match = re.match(r'^[^\[\]]*[\[\]](?P<chr>[^:\[\]]+):(?P<pos>\d+)[\[\]][^\[\]]*$', alt)
    if not match:
        raise UnsupportedFormatError('alt specification in unexpected format', alt)
    return match.group('chr'), int(match.group('pos'))


def is_bnd_alt(alt: Optional[str]) -> bool:
    return bool(alt) and ('[' in alt or ']' in alt)


def parse_filter(value) -> Optional[bool]:
    if value is None or pd.isnull(value) or str(value).strip() in {'', '.'}:
        return None
    return str(value).strip().upper() == 'PASS'


def parse_genes(info: Dict) -> List[str]:
    genes = []
    for field in GENE_INFO_FIELDS:
        value = info.get(field)
        if value and value is not True:
            genes.extend([g for g in re.split(r'[;,|&]', str(value)) if g])
    return genes


def convert_record(
    record: VcfRecordType, source: str, prefer_base_svtype: bool = False
) -> List[StructuralVariant]:
    """
    converts a vcf record to a variant for each of its alternate alleles

    The type is taken from the secondary type (SVTYPE2) when given unless the base type is preferred.
    The second breakpoint comes from the mate in the alt statement for breakends, otherwise from CHR2/END
    """
    variants = []
    svlen = record.info.get('SVLEN')
    lengths = (
        [abs(int(float(value))) for value in str(svlen).split(',') if value]
        if svlen not in (None, True)
        else []
    )
    genes = parse_genes(record.info)

    for alt_index, alt in enumerate(record.alts if record.alts else [None]):
        length = lengths[alt_index] if alt_index < len(lengths) else None
        base_type = record.info.get('SVTYPE')
        if not base_type and alt and alt.startswith('<'):
            base_type = alt
        elif not base_type and is_bnd_alt(alt):
            base_type = SVTYPE.BND
        event_type = choose_svtype(base_type, record.info.get('SVTYPE2'), prefer_base_svtype)

        chrom1 = normalize_chromosome(record.chrom)
        pos1 = record.pos
        end_missing = False
        if is_bnd_alt(alt):
            chrom2, pos2 = parse_bnd_alt(alt)
            chrom2 = normalize_chromosome(chrom2)
        else:
            chrom2 = normalize_chromosome(record.info.get('CHR2', record.chrom))
            pos2 = record.stop
            end_missing = 'END' not in record.info

        if event_type != SVTYPE.BND and chrom1 == chrom2:
            pos1, pos2 = min(pos1, pos2), max(pos1, pos2)
            if length and (end_missing or (event_type == SVTYPE.INS and pos1 == pos2)):
                pos2 = pos1 + length
            if length is None:
                length = pos2 - pos1
        elif event_type != SVTYPE.BND and chrom1 != chrom2:
            length = None

        variants.append(
            StructuralVariant(
                source=source,
                event_type=event_type,
                chrom1=chrom1,
                pos1=pos1,
                chrom2=chrom2,
                pos2=pos2,
                length=length,
                genes=frozenset(genes),
                filter_pass=parse_filter(record.filter),
                id=record.id or '',
            )
        )
    return variants


def parse_info(info_field) -> Dict:
    info: Dict = {}
    if info_field is None or pd.isnull(info_field):
        return info
    for pair in str(info_field).split(';'):
        if '=' in pair:
            key, value = pair.split('=', 1)
            info[key] = value
        elif pair:
            info[pair] = True
    if 'END' in info:
        info['END'] = int(float(info['END']))
    return info


def convert_pandas_rows_to_variants(df: pd.DataFrame) -> List[VcfRecordType]:
    df['info'] = df['INFO'].apply(parse_info)
    df['alts'] = df['ALT'].apply(lambda a: a.split(',') if not pd.isnull(a) else [])

    rows = []
    for _, row in df.iterrows():
        rows.append(
            VcfRecordType(
                id=row['ID'] if not pd.isnull(row['ID']) else None,
                pos=int(row['POS']),
                info=row['info'],
                chrom=row['CHROM'],
                ref=row['REF'] if not pd.isnull(row['REF']) else None,
                alts=row['alts'],
                filter=row['FILTER'] if 'FILTER' in df.columns else None,
            )
        )
    return rows


def _read_header_lines(fh) -> List[str]:
    header_lines = []
    line = '##'
    while line.startswith('##'):
        header_lines.append(line)
        line = fh.readline().strip()
    return header_lines[1:]


def pandas_vcf(input_file: str) -> Tuple[List[str], pd.DataFrame]:
    """
    Read a standard vcf file (optionally gzipped) into a pandas dataframe
    """
    # read the comment/header information
    try:
        with open(input_file, 'r') as fh:
            header_lines = _read_header_lines(fh)
    except UnicodeDecodeError:
        with gzip.open(input_file, 'rt') as fh:
            header_lines = _read_header_lines(fh)
    # read the data
    df = pd.read_csv(
        input_file,
        sep='\t',
        skiprows=len(header_lines),
        dtype={
            'CHROM': str,
            'POS': int,
            'ID': str,
            'INFO': str,
            'FORMAT': str,
            'REF': str,
            'ALT': str,
            'FILTER': str,
        },
        na_values=PANDAS_DEFAULT_NA_VALUES + ['.'],
    )
    df = df.rename(columns={df.columns[0]: df.columns[0].replace('#', '')})
    required_columns = ['CHROM', 'INFO', 'POS', 'REF', 'ALT', 'ID']
    for col in required_columns:
        if col not in df.columns:
            raise KeyError(f'Missing required column: {col}')
    return header_lines, df


def convert_file(
    input_file: str, source: str, filter_pass: bool = False, prefer_base_svtype: bool = False
) -> List[StructuralVariant]:
    """process a VCF file

    Args:
        input_file: the input file name
        source: name given to the variants read
        filter_pass: only keep records which passed the caller's filters
        prefer_base_svtype: use SVTYPE even when SVTYPE2 is given

    Raises:
        UnsupportedFormatError: if a breakend alt statement cannot be parsed
    """
    _, data = pandas_vcf(input_file)
    variants = []
    skipped = 0
    for record in convert_pandas_rows_to_variants(data):
        if filter_pass and parse_filter(record.filter) is not True:
            skipped += 1
            continue
        variants.extend(convert_record(record, source, prefer_base_svtype))
    if filter_pass:
        logger.info(f'skipped {skipped} records which did not pass filters')
    return variants
