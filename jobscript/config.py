"""Handles the default values used when generating job scripts.

.. autosummary::
   :nosignatures:

   Config
   DEFAULT_CONFIG
"""

from __future__ import annotations

import collections
import contextlib
from pathlib import Path
from typing import Any, Sequence

from .parameters import Parameter

DEFAULT_CONFIG = [
    Parameter("name", "job", str, "Job name", extra={"short": "-n"}),
    Parameter(
        "ncpus",
        1,
        int,
        "CPU number (logical cpu number)",
        extra={"short": "-@", "metavar": "N"},
    ),
    Parameter("mem", None, str, "Memory, e.g. 5gb", extra={"short": "-m"}),
    Parameter("queue", "batch", str, "Queue", extra={"short": "-q"}),
    Parameter("walltime", "30:00:00:00", str, "Walltime", extra={"short": "-w"}),
    Parameter(
        "submit_command",
        "qsub",
        str,
        "Command that submits a job script to the scheduler. The path of the "
        "script is appended as the last argument.",
        hidden=True,
    ),
]
"""list: built-in defaults for the job parameters"""


class Config(collections.UserDict):
    """Class handling the default job parameters."""

    def __init__(
        self,
        default: Sequence[Parameter] | None = None,
        mode: str = "update",
        *,
        check_validity: bool = True,
    ):
        """
        Args:
            default (sequence of :class:`~jobscript.parameters.Parameter`, optional):
                Default configuration values. The default configuration also defines
                what parameters can typically be defined and it provides additional
                information for these parameters.
            mode (str):
                Defines the mode in which the configuration is used. Possible values are

                * `insert`: any new configuration key can be inserted
                * `update`: only the values defined by `default` can be updated
                * `locked`: no values can be changed

                Note that the items specified by `default` will always be inserted,
                independent of the `mode`.
            check_validity (bool):
                Determines whether a `ValueError` is raised if a default value cannot
                be converted to the type of its parameter.
        """
        if default is None:
            default = []
        self._default = default

        # initialize parameters with default ones
        self.mode = "insert"  # temporarily allow inserting items
        super().__init__()
        for param_obj in default:
            self[param_obj.name] = param_obj.convert(strict=check_validity)

        # set the mode for future additions
        self.mode = mode

    def load(self, path: str | Path):
        """Load configuration from yaml file."""
        import yaml

        with Path(path).open() as fp:
            try:
                data = yaml.safe_load(fp)
            except yaml.YAMLError as err:
                raise ValueError(f"Invalid configuration file `{path}`: {err}") from err
        if data is None:
            return  # empty file
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file `{path}` does not define a mapping")
        self.update(data)

    def parameter(self, key: str) -> Parameter | None:
        """Return the :class:`~jobscript.parameters.Parameter` describing `key`"""
        for param_obj in self._default:
            if param_obj.name == key:
                return param_obj
        return None

    def __setitem__(self, key: str, value):
        """Update item `key` with `value`"""
        if self.mode == "insert":
            self.data[key] = value

        elif self.mode == "update":
            if key not in self:
                raise KeyError(
                    f"{key} is not present, but config is in `{self.mode}` mode"
                )
            param_obj = self.parameter(key)
            if param_obj is not None:
                if value is None and param_obj.default_value is not None:
                    raise ValueError(f"Parameter `{key}` requires a value")
                value = param_obj.convert(value)
            self.data[key] = value

        elif self.mode == "locked":
            raise RuntimeError("Configuration is locked")

        else:
            raise ValueError(f"Unsupported configuration mode `{self.mode}`")

    def copy(self) -> Config:
        """Return a copy of the configuration."""
        obj = self.__class__(self._default, self.mode)
        mode, obj.mode = obj.mode, "insert"
        obj.update(self)
        obj.mode = mode
        return obj

    def to_dict(self) -> dict[str, Any]:
        """Convert the configuration to a simple dictionary.

        Returns:
            dict: A representation of the configuration in a normal :class:`dict`.
        """
        return dict(self.items())

    def __repr__(self) -> str:
        """Represent the configuration as a string."""
        return f"{self.__class__.__name__}({repr(self.to_dict())})"

    @contextlib.contextmanager
    def __call__(self, values: dict[str, Any] | None = None, **kwargs):
        """Context manager temporarily changing the configuration.

        Args:
            values (dict): New configuration parameters
            **kwargs: New configuration parameters
        """
        data_initial = self.to_dict()  # save old configuration
        # set new configuration
        if values is not None:
            self.update(values)
        self.update(kwargs)
        try:
            yield  # return to caller
        finally:
            # restore old configuration
            self.update(data_initial)


config = Config(DEFAULT_CONFIG, mode="update")
"""Config: the package-wide default job parameters"""
