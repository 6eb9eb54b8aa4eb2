import glob
import os

import pytest

from svcompare.variant import StructuralVariant

DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')


long_running_test = pytest.mark.skipif(
    os.environ.get('RUN_FULL') != '1',
    reason='Only running FAST tests subset',
)


def get_data(*paths):
    return os.path.join(DATA_DIR, *paths)


def glob_exists(*pos, strict=False, n=1):
    globexpr = os.path.join(*pos)
    file_list = glob.glob(globexpr)
    if strict and len(file_list) == n:
        return file_list[0] if len(file_list) == 1 else file_list
    elif not strict and len(file_list) > 0:
        return file_list
    else:
        print(globexpr)
        print(file_list)
        return False


def build_variant(event_type, chrom1, pos1, chrom2=None, pos2=None, source='main', **kwargs):
    chrom2 = chrom1 if chrom2 is None else chrom2
    pos2 = pos1 if pos2 is None else pos2
    if 'length' not in kwargs and chrom1 == chrom2:
        kwargs['length'] = abs(pos2 - pos1)
    return StructuralVariant(source, event_type, chrom1, pos1, chrom2, pos2, **kwargs)
