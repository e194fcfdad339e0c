"""Submission of job scripts to the scheduler.

.. autosummary::
   :nosignatures:

   CommandSubmitter
   submit_job
"""

from __future__ import annotations

import logging
import shlex
import subprocess as sp
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Protocol, Union

from .config import config

if TYPE_CHECKING:
    from .request import JobRequest


class SubmissionRequestedWithoutOutput(RuntimeError):
    """raised when a job should be submitted without an explicit script path"""


class SubmissionCommandError(RuntimeError):
    """raised when the submission command cannot be launched"""


class Submitter(Protocol):
    """anything that can hand a job script to a scheduler"""

    def run(self, path: Path) -> int:
        """submit the script at `path` and return the exit status"""


class CommandSubmitter:
    """submits job scripts by running an external command like `qsub`"""

    def __init__(self, command: Union[str, List[str]] = "qsub"):
        """
        Args:
            command (str or list):
                The command, which is called with the path of the job script as the
                only additional argument. Strings are split like a shell would.
        """
        if isinstance(command, str):
            command = shlex.split(command)
        if not command:
            raise ValueError("Submission command must not be empty")
        self.command = list(command)

    def __repr__(self):
        return f"{self.__class__.__name__}(command={self.command!r})"

    def run(self, path: Union[str, Path]) -> int:
        """run the command for the job script at `path`

        The command inherits the standard streams and is waited for without any
        timeout.

        Returns:
            int: The exit status of the command
        """
        cmd_args = [*self.command, str(path)]
        logger = logging.getLogger("jobscript.submit")
        logger.info("Run `%s`", " ".join(shlex.quote(arg) for arg in cmd_args))
        try:
            proc = sp.run(cmd_args)
        except OSError as err:
            raise SubmissionCommandError(
                f"Could not run `{self.command[0]}`: {err}"
            ) from err
        logger.debug("Submission command returned %d", proc.returncode)
        return proc.returncode


def submit_job(request: JobRequest, submitter: Optional[Submitter] = None) -> int:
    """submit the job script written for `request`

    Only scripts whose path was chosen explicitly are submitted. The script is not
    removed if submission fails, and submission is never retried.

    Args:
        request (:class:`~jobscript.request.JobRequest`):
            The request whose script has been generated
        submitter:
            The object performing the submission. Defaults to a
            :class:`CommandSubmitter` using the configured `submit_command`.

    Returns:
        int: The exit status reported by the submitter
    """
    if not request.output_explicit:
        raise SubmissionRequestedWithoutOutput(
            "Output file not specified. Job submission aborted."
        )
    if submitter is None:
        submitter = CommandSubmitter(config["submit_command"])
    return submitter.run(request.output_path)
