import errno
import logging
import os
from typing import Dict, Iterable, List, Optional

import pandas as pd
from mavis_config import bash_expands

logger = logging.getLogger('svcompare')


def filepath(path):
    try:
        file_list = bash_expands(path)
    except FileNotFoundError:
        raise TypeError('File does not exist', path)
    else:
        if not file_list:
            raise TypeError('File not found', path)
        elif len(file_list) > 1:
            raise TypeError('File pattern match multiple files and expected only one', path)
    return file_list[0]


def cast_null(input_value):
    value = str(input_value).lower()
    if value in ['none', 'null', 'nan', '', '.']:
        return None
    raise TypeError('casting to null/None failed', input_value)


def cast_boolean(input_value):
    value = str(input_value).lower()
    if value in ['t', 'true', '1', 'y', 'yes', '+', 'pass']:
        return True
    elif value in ['f', 'false', '0', 'n', 'no', '-']:
        return False
    raise TypeError('casting to boolean failed', input_value)


def cast(value, cast_func):
    """
    cast a value to a given type

    Example:
        >>> cast('1', int)
        1
    """
    if cast_func == bool:
        value = cast_boolean(value)
    elif cast_func == int:
        value = int(round(float(value)))
    else:
        value = cast_func(value)
    return value


def soft_cast(value, cast_type):
    """
    cast a value to a given type, if the cast fails, cast to null

    Example:
        >>> soft_cast(None, int)
        None
        >>> soft_cast('', int)
        None
        >>> soft_cast('12.0', int)
        12
    """
    try:
        return cast(value, cast_type)
    except (TypeError, ValueError):
        pass
    return cast_null(value)


def log_arguments(args):
    """
    output the arguments to the console

    Args:
        args (Namespace): the namespace to print arguments for
    """
    logger.info('arguments')

    indent = ' '

    for arg, val in sorted(args.__dict__.items()):
        if isinstance(val, list):
            if len(val) <= 1:
                logger.info(f'{indent}{arg} = {val}')
                continue
            logger.info(f'{indent}{arg} = [')
            for v in val:
                logger.info(f'{indent * 2}{repr(v)}')
            logger.info(f'{indent}]')
        elif any([isinstance(val, typ) for typ in [str, int, float, bool, tuple]]) or val is None:
            logger.info(f'{indent}{arg} = {repr(val)}')
        else:
            logger.info(f'{arg} = {object.__repr__(val)}')


def mkdirp(dirname):
    """
    Make a directory or path of directories. Suppresses the error that is normally raised when the directory already exists
    """
    logger.info(f"creating output directory: '{dirname}'")
    try:
        os.makedirs(dirname)
    except OSError as exc:
        if exc.errno == errno.EEXIST and os.path.isdir(dirname):
            pass
        else:
            raise exc
    return dirname


def output_tabbed_file(rows: Iterable, filename: str, header: Optional[List[str]] = None):
    """
    write a list of records (dictionaries or objects with a flatten method) to a tab-delimited file

    Args:
        rows: the records to write
        filename: path to the output file
        header: the columns to write, in order. Defaults to the keys of the records as first seen
    """
    if header is None:
        custom_header = False
        header = []
    else:
        custom_header = True
    records: List[Dict] = []
    for row in rows:
        if not isinstance(row, dict):
            row = row.flatten()
        records.append(row)
        if not custom_header:
            header.extend([col for col in row if col not in header])
    if os.path.dirname(filename):
        mkdirp(os.path.dirname(filename))
    logger.info(f'writing: {filename}')
    df = pd.DataFrame(records, columns=header, dtype=object)
    df = df.fillna('None')
    df.to_csv(filename, columns=header, index=False, sep='\t')
