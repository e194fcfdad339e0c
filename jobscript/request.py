"""Resolution of the parameters that describe a single job script.

.. autosummary::
   :nosignatures:

   JobRequest
   resolve_request
   MissingCommand
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from .config import Config
from .config import config as default_config
from .render import default_output_path

BUILTIN_TEMPLATE = "built-in"


class MissingCommand(ValueError):
    """raised when a job is requested without a command to run"""


@dataclass(frozen=True)
class JobRequest:
    """the complete set of values used to render a job script

    Apart from `mem` and `files`, all fields carry a concrete value.
    """

    command: str
    output_path: Path
    files: Tuple[Path, ...] = ()
    name: str = "job"
    ncpus: int = 1
    mem: Optional[str] = None
    queue: str = "batch"
    walltime: str = "30:00:00:00"
    template: Optional[Path] = None
    output_explicit: bool = False

    @property
    def template_source(self) -> str:
        """str: path of the template or `built-in` for the default template"""
        if self.template is None:
            return BUILTIN_TEMPLATE
        return str(self.template)


def _is_absent(value) -> bool:
    return value is None or value == ""


def resolve_request(
    command: str,
    files: Iterable[Union[str, Path]] = (),
    *,
    name: Optional[str] = None,
    ncpus: Optional[int] = None,
    mem: Optional[str] = None,
    queue: Optional[str] = None,
    walltime: Optional[str] = None,
    template: Union[str, Path, None] = None,
    outfile: Union[str, Path, None] = None,
    config: Optional[Config] = None,
    now: Optional[datetime.datetime] = None,
) -> JobRequest:
    """merge user supplied values with the defaults

    Args:
        command (str):
            The command line executed by the job
        files (list):
            Input files of the job, which custom templates can refer to
        name (str):
            Name of the job
        ncpus (int):
            Number of (logical) CPUs
        mem (str):
            Memory specification in the format of the scheduler, e.g. `5gb`
        queue (str):
            Queue the job is submitted to
        walltime (str):
            Maximal run time in the format of the scheduler
        template (str or :class:`~pathlib.Path`):
            Template file for the job script. The built-in template is used if
            omitted.
        outfile (str or :class:`~pathlib.Path`):
            Path of the job script. If omitted, a path based on the current time is
            chosen.
        config (:class:`~jobscript.config.Config`):
            Default values used for all parameters that are not given. Uses the
            package configuration if omitted.
        now (:class:`~datetime.datetime`):
            Time used for deriving the default output path

    Returns:
        :class:`JobRequest`: The resolved parameters
    """
    logger = logging.getLogger("jobscript.request")

    if command is None or not command.strip():
        raise MissingCommand("No command given for the job")

    if config is None:
        config = default_config

    values = {
        "name": name,
        "ncpus": ncpus,
        "mem": mem,
        "queue": queue,
        "walltime": walltime,
    }
    for key, value in values.items():
        if _is_absent(value):
            values[key] = config[key]
            logger.debug("Use default value `%s` for `%s`", values[key], key)
            if key != "mem" and _is_absent(values[key]):
                raise ValueError(f"No value for `{key}` configured")

    try:
        values["ncpus"] = int(values["ncpus"])
    except (TypeError, ValueError) as err:
        raise ValueError(f"Invalid CPU number `{values['ncpus']}`") from err
    if values["ncpus"] < 1:
        raise ValueError(f"CPU number must be positive, not {values['ncpus']}")

    if _is_absent(values["mem"]):
        values["mem"] = None
    else:
        values["mem"] = str(values["mem"])
    for key in ["name", "queue", "walltime"]:
        values[key] = str(values[key])

    if _is_absent(outfile):
        output_path = default_output_path(now)
        output_explicit = False
    else:
        output_path = Path(outfile)
        output_explicit = True

    request = JobRequest(
        command=command,
        output_path=output_path,
        files=tuple(Path(f) for f in files),
        template=None if _is_absent(template) else Path(template),
        output_explicit=output_explicit,
        **values,
    )
    logger.debug("Resolved job request: %s", request)
    return request
