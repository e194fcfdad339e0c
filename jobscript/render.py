"""Rendering of job scripts from templates.

Templates are plain text files with placeholders of the form `{key}`. The
placeholders are replaced literally; there is no further template language.

.. autosummary::
   :nosignatures:

   generate_job_script
   render_script
   substitute_placeholders
   write_script
"""

from __future__ import annotations

import datetime
import errno
import logging
import os
import re
import shlex
import stat
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Union

if TYPE_CHECKING:
    from .request import JobRequest

DEFAULT_TEMPLATE_PATH = Path(__file__).parent / "templates" / "pbs.template"
OUTPUT_PATH_FORMAT = "job_script_%Y%m%d%H%M%S.sh"


class TemplateReadError(OSError):
    """raised when a template file cannot be read"""

    def __init__(self, path: Union[str, Path], cause: Exception):
        super().__init__(f"Cannot read template `{path}`: {cause}")
        self.path = Path(path)
        self.cause = cause


class OutputWriteError(OSError):
    """raised when the job script cannot be written"""

    def __init__(self, path: Union[str, Path], cause: Exception):
        super().__init__(f"Cannot write job script `{path}`: {cause}")
        self.path = Path(path)
        self.cause = cause


def default_output_path(now: Optional[datetime.datetime] = None) -> Path:
    """path of the job script in the current directory, based on the time

    Args:
        now (:class:`~datetime.datetime`):
            The time to use; defaults to the current local time

    Returns:
        :class:`~pathlib.Path`: A path of the form `job_script_YYYYMMDDHHMMSS.sh`
    """
    if now is None:
        now = datetime.datetime.now()
    return Path(now.strftime(OUTPUT_PATH_FORMAT))


def load_template(path: Union[str, Path, None] = None) -> str:
    """read a template file

    Args:
        path (str or :class:`~pathlib.Path`):
            The template file. The built-in template is used if omitted.

    Returns:
        str: The content of the template
    """
    template_path = DEFAULT_TEMPLATE_PATH if path is None else Path(path)
    logging.getLogger("jobscript.render").info("Load template `%s`", template_path)
    try:
        with open(template_path, "r", encoding="utf-8", newline="") as fp:
            return fp.read()
    except (OSError, UnicodeDecodeError) as err:
        raise TemplateReadError(template_path, err) from err


def placeholder_values(request: JobRequest) -> Dict[str, str]:
    """the replacement text for each placeholder

    The resource placeholders are replaced by complete clauses: `{ncpus}` becomes
    `:ncpus=N` and `{mem}` becomes `:mem=VALUE` or the empty string when no memory
    was requested. The template thus reads `select=1{ncpus}{mem}`.
    """
    if request.mem is None:
        mem = ""
    else:
        mem = f":mem={request.mem}"
    return {
        "name": request.name,
        "ncpus": f":ncpus={request.ncpus}",
        "mem": mem,
        "queue": request.queue,
        "walltime": request.walltime,
        "command": request.command,
        "files": " ".join(shlex.quote(str(path)) for path in request.files),
    }


def substitute_placeholders(template_text: str, values: Mapping[str, str]) -> str:
    """replace the placeholders `{key}` of a template by the respective values

    The template is scanned once from left to right and the replacement text is
    never scanned again, so values containing placeholders are kept literally.
    Placeholders without a value stay untouched.

    Args:
        template_text (str):
            The template
        values (dict):
            The replacement text for each key

    Returns:
        str: The template with all known placeholders replaced
    """
    if not values:
        return template_text
    tokens = "|".join(re.escape(key) for key in values)
    pattern = re.compile(r"\{(" + tokens + r")\}")
    return pattern.sub(lambda match: values[match.group(1)], template_text)


def render_script(request: JobRequest, template_text: Optional[str] = None) -> str:
    """create the content of the job script

    Args:
        request (:class:`~jobscript.request.JobRequest`):
            The resolved job parameters
        template_text (str):
            The template. If omitted, the template of the request is loaded.

    Returns:
        str: The job script
    """
    if template_text is None:
        template_text = load_template(request.template)
    script = substitute_placeholders(template_text, placeholder_values(request))
    logging.getLogger("jobscript.render").debug("Script: `%s`", script)
    return script


def _default_file_mode() -> int:
    """permissions that newly created files get on this platform"""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_script(script: str, path: Union[str, Path]) -> Path:
    """write the job script atomically

    The content is first written to a temporary file next to `path`, which is
    then renamed. An existing file is thus either replaced completely or not at
    all. An existing file keeps its permissions and must be writable.

    Args:
        script (str):
            The content of the job script
        path (str or :class:`~pathlib.Path`):
            The destination

    Returns:
        :class:`~pathlib.Path`: The path of the written file
    """
    path = Path(path)
    if path.is_file():
        if not os.access(path, os.W_OK):
            raise OutputWriteError(
                path, PermissionError(errno.EACCES, "Permission denied", str(path))
            )
        mode = stat.S_IMODE(path.stat().st_mode)
    else:
        mode = _default_file_mode()

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
    except OSError as err:
        raise OutputWriteError(path, err) from err

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fp:
            fp.write(script)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except (OSError, UnicodeError) as err:
        raise OutputWriteError(path, err) from err
    finally:
        # the temporary file only remains if it was not renamed
        if os.path.lexists(tmp_name):
            os.unlink(tmp_name)

    logging.getLogger("jobscript.render").info("Wrote job script `%s`", path)
    return path


def generate_job_script(request: JobRequest) -> Path:
    """render the job script of a request and write it to its output path

    The template is read completely before anything is written, so a failure to
    read it leaves the destination untouched.

    Args:
        request (:class:`~jobscript.request.JobRequest`):
            The resolved job parameters

    Returns:
        :class:`~pathlib.Path`: The path of the job script
    """
    script = render_script(request)
    return write_script(script, request.output_path)
