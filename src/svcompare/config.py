import argparse
from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from .constants import SVTYPE_ORDER, float_fraction, positive_int
from .schemas import DEFAULTS, validate_config
from .util import cast_boolean, filepath
from .variant import ChromosomeRegion


@dataclass(frozen=True)
class ComparisonConfig:
    """
    The options which control how variants are compared. Built once per run and passed to every
    comparison. Options left as None are not used as criteria

    Attributes:
        distance_threshold: maximum distance between corresponding breakpoints
        intersection_threshold: minimum reciprocal overlap between two events
        minimal_proportion: minimum ratio of the smaller to the larger event size
        require_common_genes: two events must overlap at least one gene in common
        variant_types: only variants of these types are compared
        excluded_regions: variants with a breakpoint in these regions are not compared
        distance_sweep_values: distance thresholds to report statistics for
        intersection_sweep_values: overlap thresholds to report statistics for
        concurrency_limit: number of processes to use
    """

    distance_threshold: Optional[int] = None
    intersection_threshold: Optional[float] = None
    minimal_proportion: Optional[float] = None
    require_common_genes: bool = False
    variant_types: Optional[FrozenSet[str]] = None
    excluded_regions: Tuple[ChromosomeRegion, ...] = ()
    distance_sweep_values: Tuple[int, ...] = ()
    intersection_sweep_values: Tuple[float, ...] = ()
    concurrency_limit: int = 1

    def __post_init__(self):
        if self.distance_threshold is not None and self.distance_threshold < 0:
            raise ValueError('distance threshold cannot be negative', self.distance_threshold)
        for name in ['intersection_threshold', 'minimal_proportion']:
            value = getattr(self, name)
            if value is not None and not 0 <= value <= 1:
                raise ValueError(f'{name} must be a value between 0 and 1', value)
        if self.variant_types is not None:
            object.__setattr__(self, 'variant_types', frozenset(self.variant_types))
            unknown = self.variant_types - set(SVTYPE_ORDER)
            if unknown:
                raise ValueError('unrecognized variant types', sorted(unknown))
        object.__setattr__(self, 'excluded_regions', tuple(self.excluded_regions))
        object.__setattr__(self, 'distance_sweep_values', tuple(self.distance_sweep_values))
        object.__setattr__(
            self, 'intersection_sweep_values', tuple(self.intersection_sweep_values)
        )
        if self.concurrency_limit < 1:
            raise ValueError('concurrency limit must be at least 1', self.concurrency_limit)

    @property
    def has_positional_criterion(self) -> bool:
        return self.distance_threshold is not None or self.intersection_threshold is not None

    def with_criteria(self, **kwargs) -> 'ComparisonConfig':
        """
        copy of the config with some options replaced

        Example:
            >>> ComparisonConfig(distance_threshold=10).with_criteria(distance_threshold=100).distance_threshold
            100
        """
        return replace(self, **kwargs)

    @classmethod
    def from_config(
        cls, config: Dict, excluded_regions: Iterable[ChromosomeRegion] = ()
    ) -> 'ComparisonConfig':
        """
        build the run configuration from a (validated) dictionary of dotted option names

        Args:
            config: the run options, missing values are taken from the defaults
            excluded_regions: regions already loaded from the region filter file
        """
        merged = dict(DEFAULTS)
        merged.update(config)
        variant_types = merged['compare.variant_types']
        return cls(
            distance_threshold=merged['compare.distance_variance'],
            intersection_threshold=merged['compare.intersection_variance'],
            minimal_proportion=merged['compare.minimal_proportion'],
            require_common_genes=merged['compare.gene_intersection'],
            variant_types=frozenset(variant_types) if variant_types is not None else None,
            excluded_regions=tuple(excluded_regions),
            distance_sweep_values=tuple(merged['statistics.distance_variance']),
            intersection_sweep_values=tuple(merged['statistics.intersection_variance']),
            concurrency_limit=merged['compare.concurrency_limit'],
        )


def load_config(config: Dict, overrides: Optional[Dict] = None) -> Dict:
    """
    Merge command line overrides onto a config loaded from file and check the result

    Args:
        config: values read from the JSON config file
        overrides: values given on the command line, None values are ignored

    Returns:
        the validated config with defaults filled in

    Raises:
        snakemake.exceptions.WorkflowError: if the merged config does not conform to the schema
    """
    result = dict(config)
    for key, value in (overrides or {}).items():
        if value is not None:
            result[key] = value
    validate_config(result)
    return result


class CustomHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """
    subclass the default help formatter to stop default printing for required arguments
    """

    def _format_args(self, action, default_metavar):
        if action.metavar is None:
            action.metavar = get_metavar(action.type)
        return super(CustomHelpFormatter, self)._format_args(action, default_metavar)

    def _get_help_string(self, action):
        if action.required or action.default is None:
            return action.help
        return super(CustomHelpFormatter, self)._get_help_string(action)

    def add_arguments(self, actions):
        # sort the arguments alphanumerically so they print in the help that way
        actions = sorted(actions, key=lambda x: getattr(x, 'option_strings'))
        super(CustomHelpFormatter, self).add_arguments(actions)


def get_metavar(arg_type):
    """
    For a given argument type, returns the string to be used for the metavar argument in add_argument

    Example:
        >>> get_metavar(bool)
        '{True,False}'
    """
    if arg_type in [bool, cast_boolean]:
        return '{True,False}'
    elif arg_type in [float_fraction, float]:
        return 'FLOAT'
    elif arg_type in [int, positive_int]:
        return 'INT'
    elif arg_type == filepath:
        return 'FILEPATH'
    return None
