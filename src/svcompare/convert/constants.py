import re
from typing import Dict, Optional

from mavis_config.constants import MavisNamespace

from ..constants import SVTYPE


class SUPPORTED_TOOL(MavisNamespace):
    """
    Supported input formats

    Attributes:
        BIONANO: Bionano Solve/Access structural variant map (smap)
        ANNOTSV: AnnotSV annotated structural variant table
        VCF: structural variant VCF (Long Ranger, Sniffles, Manta, Dragen ICLR, ...)
        TAB: the normalized table written by svcompare convert
    """

    BIONANO: str = 'bionano'
    ANNOTSV: str = 'annotsv'
    VCF: str = 'vcf'
    TAB: str = 'tab'


class VCF_FLAVOR(MavisNamespace):
    """
    The sequencing based callers whose VCF output can be compared. Each only changes how the
    source is named, all of them are read by the same VCF reader
    """

    LONGRANGER: str = 'longranger'
    SNIFFLES: str = 'sniffles'
    MANTA: str = 'manta'
    ICLR: str = 'iclr'


TOOL_SVTYPE_MAPPING: Dict[str, str] = {
    'BND': SVTYPE.BND,
    'TRA': SVTYPE.BND,
    'CTX': SVTYPE.BND,
    'TRANSLOCATION': SVTYPE.BND,
    'INTERCHROMOSOMAL': SVTYPE.BND,
    'CNV': SVTYPE.CNV,
    'GAIN': SVTYPE.CNV,
    'LOSS': SVTYPE.CNV,
    'DEL': SVTYPE.DEL,
    'DELETION': SVTYPE.DEL,
    'INS': SVTYPE.INS,
    'INSERTION': SVTYPE.INS,
    'DUP': SVTYPE.DUP,
    'DUP:TANDEM': SVTYPE.DUP,
    'DUP:INT': SVTYPE.DUP,
    'DUPLICATION': SVTYPE.DUP,
    'ITX': SVTYPE.DUP,
    'INV': SVTYPE.INV,
    'INVERSION': SVTYPE.INV,
    'UNK': SVTYPE.UNK,
}
"""type names used by the supported tools and the type they are compared as"""

BIONANO_SVTYPE_PREFIXES = [
    ('deletion', SVTYPE.DEL),
    ('insertion', SVTYPE.INS),
    ('inversion', SVTYPE.INV),
    ('duplication', SVTYPE.DUP),
    ('translocation', SVTYPE.BND),
    ('trans_', SVTYPE.BND),
]
"""Bionano type names carry qualifiers (ex. inversion_paired, duplication_split) after the base type"""


def map_tool_svtype(value: Optional[str]) -> str:
    """
    Example:
        >>> map_tool_svtype('<DUP:TANDEM>')
        'DUP'
        >>> map_tool_svtype('complex')
        'UNK'
    """
    if value is None:
        return SVTYPE.UNK
    value = re.sub(r'^<|>$', '', str(value).strip()).upper()
    return TOOL_SVTYPE_MAPPING.get(value, SVTYPE.UNK)


def map_bionano_svtype(value: Optional[str]) -> str:
    if value is None:
        return SVTYPE.UNK
    value = str(value).strip().lower()
    for prefix, svtype in BIONANO_SVTYPE_PREFIXES:
        if value.startswith(prefix):
            return svtype
    return map_tool_svtype(value)


def choose_svtype(base: Optional[str], secondary: Optional[str], prefer_base: bool = False) -> str:
    """
    resolve the type of a record which may give both a base and a secondary type (SVTYPE/SVTYPE2).
    The secondary type is used when present unless the base type is preferred
    """
    if secondary and not prefer_base:
        return map_tool_svtype(secondary)
    if base:
        return map_tool_svtype(base)
    return map_tool_svtype(secondary)
