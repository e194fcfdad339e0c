"""
Infrastructure for describing the adjustable values of a job script.

.. autosummary::
   :nosignatures:

   Parameter
   NoValue
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Type, Union


class NoValueType:
    """special value to indicate no value for a parameter"""

    def __repr__(self):
        return "NoValue"


NoValue = NoValueType()


@dataclass
class Parameter:
    """class representing a single parameter

    Args:
        name (str):
            The name of the parameter
        default_value:
            The default value
        cls:
            The type of the parameter, which is used for conversion
        description (str):
            A string describing the impact of this parameter. This
            description appears in the parameter help
        hidden (bool):
            Whether the parameter is hidden from the command line
        extra (dict):
            Extra arguments that are stored with the parameter. The key `short`
            defines an additional short flag for the command line.
    """

    name: str
    default_value: Any = None
    cls: Union[Type, Callable] = str
    description: str = ""
    hidden: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """check default values and cls"""
        if self.default_value is not None and self.default_value is not NoValue:
            try:
                converted_value = self.cls(self.default_value)
            except (TypeError, ValueError) as err:
                raise TypeError(
                    f"Parameter {self.name} has invalid default: {self.default_value}"
                ) from err

            if converted_value != self.default_value:
                logging.getLogger("jobscript.parameters").warning(
                    "Default value `%s` is not of type `%s`",
                    self.name,
                    getattr(self.cls, "__name__", self.cls),
                )

    def convert(self, value=NoValue, *, strict: bool = True):
        """converts a `value` into the correct type for this parameter. If
        `value` is not given, the default value is converted.

        Args:
            value:
                The value to convert
            strict (bool):
                Flag indicating whether conversion to the type indicated by `cls` is
                enforced. If `False`, the original value is returned when conversion
                fails.

        Returns:
            The converted value, which is of type `self.cls`
        """
        if value is NoValue:
            value = self.default_value

        if value is NoValue or value is None:
            pass  # treat these values special
        else:
            try:
                value = self.cls(value)
            except (TypeError, ValueError) as err:
                if strict:
                    raise ValueError(
                        f"Could not convert {value!r} to "
                        f"{getattr(self.cls, '__name__', self.cls)} for parameter "
                        f"'{self.name}'"
                    ) from err

        return value

    def _argparser_add(self, parser):
        """add a command line option for this parameter to a parser

        The option does not carry a default value, so an omitted flag shows up as
        `None` and the configured default can be applied later.
        """
        if self.hidden:
            return

        description = self.description or f"Parameter `{self.name}`"
        if self.default_value is not None:
            description += f" [{self.default_value}]"

        flags = [f"--{self.name}"]
        if "short" in self.extra:
            flags.insert(0, self.extra["short"])

        parser.add_argument(
            *flags,
            dest=self.name,
            type=self.cls,
            default=None,
            metavar=self.extra.get("metavar", "VALUE"),
            help=description,
        )
