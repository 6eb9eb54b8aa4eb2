import os
from typing import List, Optional

from ..error import UnsupportedFormatError
from ..util import logger
from ..variant import StructuralVariant, deduplicate, summarize_variants
from .annotsv import convert_file as read_annotsv
from .constants import SUPPORTED_TOOL, VCF_FLAVOR
from .smap import convert_file as read_smap
from .tab import convert_file as read_tab
from .vcf import convert_file as read_vcf


def source_name(file_type: str, filename: str, flavor: Optional[str] = None) -> str:
    """
    name of the source for the variants read from a file

    Example:
        >>> source_name('vcf', '/path/to/sample1.vcf.gz', 'sniffles')
        'vcf-sniffles_sample1'
        >>> source_name('bionano', 'exp.smap')
        'bionano'
    """
    if file_type == SUPPORTED_TOOL.BIONANO:
        return SUPPORTED_TOOL.BIONANO
    basename = os.path.basename(filename)
    if basename.endswith('.gz'):
        basename = basename[: -len('.gz')]
    basename = os.path.splitext(basename)[0]
    prefix = f'{file_type}-{flavor}' if flavor else file_type
    return f'{prefix}_{basename}'


def convert_tool_output(
    fnames: List[str],
    file_type: str,
    source: Optional[str] = None,
    filter_pass: bool = False,
    prefer_base_svtype: bool = False,
    collapse: bool = True,
) -> List[StructuralVariant]:
    """
    Reads the output from a supported tool and converts it to variants. Also collapses duplicates

    Args:
        fnames: the files to read
        file_type: one of :class:`~svcompare.convert.constants.SUPPORTED_TOOL`
        source: name for the variants read, defaults to a name derived from the tool and file
        filter_pass: only keep records the caller marked as passing (where the format has filters)
        prefer_base_svtype: use the base type over the secondary type (where the format has both)
        collapse: merge records from the same source describing the same event

    Raises:
        UnsupportedFormatError: if the file type is not supported
    """
    result: List[StructuralVariant] = []
    for fname in fnames:
        logger.info(f'loading: {fname}')
        if file_type == SUPPORTED_TOOL.TAB:
            variants = read_tab(fname, source=source, filter_pass=filter_pass)
        else:
            fname_source = source if source is not None else source_name(file_type, fname)
            if file_type == SUPPORTED_TOOL.BIONANO:
                variants = read_smap(fname, fname_source)
            elif file_type == SUPPORTED_TOOL.ANNOTSV:
                variants = read_annotsv(
                    fname,
                    fname_source,
                    filter_pass=filter_pass,
                    prefer_base_svtype=prefer_base_svtype,
                )
            elif file_type == SUPPORTED_TOOL.VCF:
                variants = read_vcf(
                    fname,
                    fname_source,
                    filter_pass=filter_pass,
                    prefer_base_svtype=prefer_base_svtype,
                )
            else:
                raise UnsupportedFormatError('unsupported file type', file_type)
        logger.info(f'read {len(variants)} variants from {fname}')
        result.extend(variants)
    if collapse:
        collapsed = deduplicate(result)
        logger.debug(f'collapsed {len(result)} to {len(collapsed)} calls')
        result = collapsed
    for event_type, count in summarize_variants(result).items():
        logger.info(f'{event_type}: {count}')
    return result


__all__ = ['SUPPORTED_TOOL', 'VCF_FLAVOR', 'convert_tool_output', 'source_name']
