import argparse

import pytest
from snakemake.exceptions import WorkflowError

from svcompare.config import ComparisonConfig, CustomHelpFormatter, get_metavar, load_config
from svcompare.constants import SVTYPE, float_fraction, positive_int
from svcompare.schemas import DEFAULTS
from svcompare.util import filepath
from svcompare.variant import ChromosomeRegion


class TestDefaults:
    def test_defaults(self):
        assert DEFAULTS['compare.distance_variance'] is None
        assert DEFAULTS['compare.intersection_variance'] is None
        assert DEFAULTS['compare.gene_intersection'] is False
        assert DEFAULTS['compare.concurrency_limit'] == 1
        assert DEFAULTS['statistics.distance_variance'] == []
        assert DEFAULTS['convert.vcf_filter_pass'] is False

    def test_immutable(self):
        with pytest.raises(TypeError):
            DEFAULTS['compare.distance_variance'] = 10


class TestLoadConfig:
    def test_fills_defaults(self):
        config = load_config({'compare.distance_variance': 100})
        assert config['compare.distance_variance'] == 100
        assert config['compare.concurrency_limit'] == 1

    def test_overrides(self):
        config = load_config(
            {'compare.distance_variance': 100, 'compare.gene_intersection': True},
            {'compare.distance_variance': 10, 'compare.gene_intersection': None},
        )
        assert config['compare.distance_variance'] == 10
        assert config['compare.gene_intersection'] is True

    def test_does_not_change_input(self):
        original = {'compare.distance_variance': 100}
        load_config(original, {'compare.distance_variance': 10})
        assert original == {'compare.distance_variance': 100}

    @pytest.mark.parametrize(
        'key,value',
        [
            ('compare.distance_variance', -1),
            ('compare.intersection_variance', 1.5),
            ('compare.minimal_proportion', -0.1),
            ('compare.variant_types', ['DEL', 'complex']),
            ('compare.concurrency_limit', 0),
            ('statistics.intersection_variance', [0.5, 2]),
            ('compare.unknown_option', 1),
        ],
    )
    def test_bad_value_error(self, key, value):
        with pytest.raises(WorkflowError):
            load_config({key: value})


class TestComparisonConfig:
    def test_from_config(self):
        config = ComparisonConfig.from_config(
            load_config(
                {
                    'compare.distance_variance': 100,
                    'compare.variant_types': ['DEL', 'DUP'],
                    'statistics.intersection_variance': [0.5, 0.9],
                }
            ),
            excluded_regions=[ChromosomeRegion('1', 1, 100)],
        )
        assert config.distance_threshold == 100
        assert config.intersection_threshold is None
        assert config.variant_types == {SVTYPE.DEL, SVTYPE.DUP}
        assert config.intersection_sweep_values == (0.5, 0.9)
        assert config.distance_sweep_values == ()
        assert config.excluded_regions == (ChromosomeRegion('1', 1, 100),)
        assert config.has_positional_criterion

    def test_from_empty_config(self):
        config = ComparisonConfig.from_config({})
        assert config == ComparisonConfig()
        assert not config.has_positional_criterion

    def test_with_criteria(self):
        base = ComparisonConfig(distance_threshold=10)
        changed = base.with_criteria(distance_threshold=None, intersection_threshold=0.5)
        assert base.distance_threshold == 10
        assert changed.distance_threshold is None
        assert changed.intersection_threshold == 0.5

    def test_hashable(self):
        assert hash(ComparisonConfig(variant_types=['DEL'])) == hash(
            ComparisonConfig(variant_types={'DEL'})
        )

    @pytest.mark.parametrize(
        'kwargs',
        [
            {'distance_threshold': -1},
            {'intersection_threshold': 1.1},
            {'minimal_proportion': -0.5},
            {'variant_types': ['complex']},
            {'concurrency_limit': 0},
        ],
    )
    def test_bad_value_error(self, kwargs):
        with pytest.raises(ValueError):
            ComparisonConfig(**kwargs)


class TestGetMetavar:
    def test_metavar(self):
        assert get_metavar(bool) == '{True,False}'
        assert get_metavar(float_fraction) == 'FLOAT'
        assert get_metavar(positive_int) == 'INT'
        assert get_metavar(filepath) == 'FILEPATH'
        assert get_metavar(str) is None


class TestCustomHelpFormatter:
    def test_hides_none_defaults(self):
        parser = argparse.ArgumentParser(formatter_class=CustomHelpFormatter)
        parser.add_argument('--threshold', type=positive_int, default=None, help='a threshold')
        parser.add_argument('--limit', type=positive_int, default=4, help='a limit')
        text = parser.format_help()
        assert '(default: None)' not in text
        assert '(default: 4)' in text
        assert '--limit INT' in text
