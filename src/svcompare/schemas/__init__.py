import collections.abc
import os
from typing import Dict

from snakemake.utils import validate as snakemake_validate

CONFIG_SCHEMA = os.path.join(os.path.dirname(__file__), 'config.json')


class ImmutableDict(collections.abc.Mapping):
    def __init__(self, data):
        self._data = data

    def __getitem__(self, key):
        return self._data[key]

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return iter(self._data)


def validate_config(config: Dict) -> None:
    """
    Check the config against the schema, filling in defaults for any missing values

    Raises:
        snakemake.exceptions.WorkflowError: if the config does not conform to the schema
    """
    snakemake_validate(config, CONFIG_SCHEMA, set_default=True)


DEFAULTS = {}
validate_config(DEFAULTS)
DEFAULTS = ImmutableDict(DEFAULTS)
