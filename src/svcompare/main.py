#!python
import argparse
import json
import logging
import os
import platform
import sys
import time
from typing import Dict, List, Optional

from . import __version__
from . import config as _config
from . import util as _util
from .constants import SUBCOMMAND, SVTYPE_ORDER, float_fraction, positive_int
from .convert import SUPPORTED_TOOL, VCF_FLAVOR, convert_tool_output
from .filters import read_excluded_regions
from .pairing import main as pairing_main
from .pairing.main import InputFile
from .util import filepath

CONFIG_ARGUMENTS = {
    'distance_variance': 'compare.distance_variance',
    'intersection_variance': 'compare.intersection_variance',
    'minimal_proportion': 'compare.minimal_proportion',
    'gene_intersection': 'compare.gene_intersection',
    'variant_type': 'compare.variant_types',
    'region_filter_file': 'compare.region_filter_file',
    'concurrency_limit': 'compare.concurrency_limit',
    'distance_variance_statistics': 'statistics.distance_variance',
    'intersection_variance_statistics': 'statistics.intersection_variance',
    'vcf_filter_pass': 'convert.vcf_filter_pass',
    'prefer_base_svtype': 'convert.prefer_base_svtype',
}
"""command line options and the config values they overwrite"""

VCF_ARGUMENTS = {
    'vcf_longranger_input': VCF_FLAVOR.LONGRANGER,
    'vcf_sniffles_input': VCF_FLAVOR.SNIFFLES,
    'vcf_manta_input': VCF_FLAVOR.MANTA,
    'vcf_iclr_input': VCF_FLAVOR.ICLR,
}


def convert_main(inputs, outputfile, file_type, filter_pass=False, prefer_base_svtype=False):
    variants = convert_tool_output(
        inputs, file_type, filter_pass=filter_pass, prefer_base_svtype=prefer_base_svtype
    )
    if os.path.dirname(outputfile):
        _util.mkdirp(os.path.dirname(outputfile))
    _util.output_tabbed_file(variants, outputfile)


def create_parser(argv):
    parser = argparse.ArgumentParser(formatter_class=_config.CustomHelpFormatter)
    parser.add_argument(
        '-v',
        '--version',
        action='version',
        version='%(prog)s version ' + __version__,
        help='Outputs the version number',
    )
    subp = parser.add_subparsers(dest='command', help='specifies which sub-program to use')
    subp.required = True
    required = {}  # hold required argument group by subparser command name
    optional = {}  # hold optional argument group by subparser command name
    for command in [SUBCOMMAND.COMPARE, SUBCOMMAND.CONVERT]:
        subparser = subp.add_parser(
            command, formatter_class=_config.CustomHelpFormatter, add_help=False
        )
        required[command] = subparser.add_argument_group('required arguments')
        optional[command] = subparser.add_argument_group('optional arguments')
        optional[command].add_argument(
            '-h', '--help', action='help', help='show this help message and exit'
        )
        optional[command].add_argument(
            '-v',
            '--version',
            action='version',
            version='%(prog)s version ' + __version__,
            help='Outputs the version number',
        )
        optional[command].add_argument('--log', help='redirect stdout to a log file', default=None)
        optional[command].add_argument(
            '--log_level',
            help='level of logging to output',
            choices=['INFO', 'DEBUG'],
            default='INFO',
        )
        optional[command].add_argument(
            '--vcf_filter_pass',
            action='store_true',
            default=None,
            help='only read records which passed the filters of the caller',
        )
        optional[command].add_argument(
            '--prefer_base_svtype',
            action='store_true',
            default=None,
            help='use the base type (SVTYPE) of records which also give a secondary type (SVTYPE2)',
        )

    # convert
    required[SUBCOMMAND.CONVERT].add_argument(
        '--file_type',
        choices=sorted(
            [SUPPORTED_TOOL.BIONANO, SUPPORTED_TOOL.ANNOTSV, SUPPORTED_TOOL.VCF, SUPPORTED_TOOL.TAB]
        ),
        required=True,
        help='Indicates the input file type to be parsed',
    )
    required[SUBCOMMAND.CONVERT].add_argument(
        '--outputfile', '-o', required=True, help='path to the outputfile', metavar='FILEPATH'
    )
    required[SUBCOMMAND.CONVERT].add_argument(
        '-n',
        '--inputs',
        nargs='+',
        help='path to the input files',
        required=True,
        metavar='FILEPATH',
    )

    # compare
    required[SUBCOMMAND.COMPARE].add_argument(
        '-o', '--output', help='path to the comparison output file', required=True
    )
    compare = optional[SUBCOMMAND.COMPARE]
    compare.add_argument(
        '--config', '-c', help='path to the JSON config file', type=filepath, default=None
    )
    compare.add_argument(
        '--bionano_input', type=filepath, default=None, help='Bionano structural variant map (smap)'
    )
    compare.add_argument(
        '--annotsv_input', nargs='+', default=[], metavar='FILEPATH', help='AnnotSV tables'
    )
    compare.add_argument(
        '--tab_input',
        nargs='+',
        default=[],
        metavar='FILEPATH',
        help='files in the normalized format written by the convert command. Callers without an input '
        'option of their own (for example Samplot) are compared in this format',
    )
    for arg, flavor in VCF_ARGUMENTS.items():
        compare.add_argument(
            f'--{arg}', nargs='+', default=[], metavar='FILEPATH', help=f'{flavor} VCF files'
        )
    compare.add_argument(
        '--main_input',
        type=filepath,
        default=None,
        help='the input all other inputs are compared against. Defaults to the Bionano input',
    )
    compare.add_argument(
        '--variant_type',
        nargs='+',
        choices=SVTYPE_ORDER,
        default=None,
        help='only compare variants of these types',
    )
    compare.add_argument(
        '--distance_variance',
        type=positive_int,
        default=None,
        help='maximum distance between corresponding breakpoints of matching variants',
    )
    compare.add_argument(
        '--intersection_variance',
        type=float_fraction,
        default=None,
        help='minimum overlap (intersection over union) of matching variants',
    )
    compare.add_argument(
        '--minimal_proportion',
        type=float_fraction,
        default=None,
        help='minimum ratio of the smaller to the larger size of matching variants',
    )
    compare.add_argument(
        '--gene_intersection',
        action='store_true',
        default=None,
        help='matching variants must overlap at least one gene in common',
    )
    compare.add_argument(
        '--region_filter_file',
        type=filepath,
        default=None,
        help='tab delimited regions (chromosome, start, end). Variants with a breakpoint in a region are not compared',
    )
    compare.add_argument(
        '--statistics_output', default=None, help='path to write match statistics to'
    )
    compare.add_argument(
        '--distance_variance_statistics',
        nargs='+',
        type=positive_int,
        default=None,
        help='distance thresholds to compute match statistics for',
    )
    compare.add_argument(
        '--intersection_variance_statistics',
        nargs='+',
        type=float_fraction,
        default=None,
        help='overlap thresholds to compute match statistics for',
    )
    compare.add_argument(
        '--concurrency_limit',
        type=positive_int,
        default=None,
        help='number of processes to use for comparisons',
    )
    return parser, parser.parse_args(argv)


def compare_inputs(args) -> List[InputFile]:
    """
    the input files given for the compare command, in a fixed order of input type

    Raises:
        FileNotFoundError: if an input file expression does not match any files
    """
    input_files = []
    if args.bionano_input:
        input_files.append(InputFile(args.bionano_input, SUPPORTED_TOOL.BIONANO))
    for fname in _util.bash_expands(*args.annotsv_input) if args.annotsv_input else []:
        input_files.append(InputFile(fname, SUPPORTED_TOOL.ANNOTSV))
    for arg, flavor in VCF_ARGUMENTS.items():
        expressions = getattr(args, arg)
        for fname in _util.bash_expands(*expressions) if expressions else []:
            input_files.append(InputFile(fname, SUPPORTED_TOOL.VCF, flavor))
    for fname in _util.bash_expands(*args.tab_input) if args.tab_input else []:
        input_files.append(InputFile(fname, SUPPORTED_TOOL.TAB))
    return input_files


def main(argv: Optional[List[str]] = None):
    """
    sets up the parser and checks the validity of command line args
    loads the config and redirects into subcommand main functions

    Args:
        argv: List of arguments, defaults to command line arguments
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())
    parser, args = create_parser(argv)

    log_conf = {
        'format': '{asctime} [{levelname}] {message}',
        'style': '{',
        'level': args.log_level,
    }

    original_logging_handlers = logging.root.handlers[:]
    for handler in logging.root.handlers:
        logging.root.removeHandler(handler)
    if args.log:  # redirect stdout AND stderr to a log file
        log_conf['filename'] = args.log
    logging.basicConfig(**log_conf)

    _util.logger.info(f'svcompare: {__version__}')
    _util.logger.info(f'hostname: {platform.node()}')
    _util.log_arguments(args)

    config: Dict = dict()
    if getattr(args, 'config', None):
        with open(args.config, 'r') as fh:
            config = json.load(fh)
    config = _config.load_config(
        config, {key: getattr(args, arg, None) for arg, key in CONFIG_ARGUMENTS.items()}
    )

    try:
        if args.command == SUBCOMMAND.CONVERT:
            try:
                args.inputs = _util.bash_expands(*args.inputs)
            except FileNotFoundError:
                parser.error(
                    '--inputs file(s) for {} {} do not exist'.format(args.command, args.inputs)
                )
            convert_main(
                args.inputs,
                args.outputfile,
                args.file_type,
                filter_pass=config['convert.vcf_filter_pass'],
                prefer_base_svtype=config['convert.prefer_base_svtype'],
            )
        else:
            try:
                input_files = compare_inputs(args)
            except FileNotFoundError as err:
                parser.error(f'input file(s) for {args.command} do not exist: {err}')
            regions = []
            if config['compare.region_filter_file']:
                regions = read_excluded_regions(config['compare.region_filter_file'])
            pairing_main.main(
                input_files=input_files,
                output=args.output,
                config=_config.ComparisonConfig.from_config(config, excluded_regions=regions),
                main_input=args.main_input,
                statistics_output=args.statistics_output,
                filter_pass=config['convert.vcf_filter_pass'],
                prefer_base_svtype=config['convert.prefer_base_svtype'],
            )
        duration = int(time.time()) - start_time
        hours = duration - duration % 3600
        minutes = duration - hours - (duration - hours) % 60
        seconds = duration - hours - minutes
        _util.logger.info(
            'run time (hh/mm/ss): {}:{:02d}:{:02d}'.format(hours // 3600, minutes // 60, seconds)
        )
        _util.logger.info(f'run time (s): {duration}')
    except Exception as err:
        raise err
    finally:
        try:
            for handler in logging.root.handlers:
                logging.root.removeHandler(handler)
            for handler in original_logging_handlers:
                logging.root.addHandler(handler)
        except Exception as err:
            print(err)


if __name__ == '__main__':
    main()
