"""
Generate job scripts for PBS schedulers from templates and submit them.

.. autosummary::
   :nosignatures:

   ~jobscript.request.resolve_request
   ~jobscript.request.JobRequest
   ~jobscript.render.generate_job_script
   ~jobscript.render.render_script
   ~jobscript.submit.submit_job
   ~jobscript.config.Config
"""

from .version import __version__

from .config import Config, config
from .parameters import Parameter
from .render import (
    OutputWriteError,
    TemplateReadError,
    generate_job_script,
    render_script,
    substitute_placeholders,
)
from .request import JobRequest, MissingCommand, resolve_request
from .submit import (
    CommandSubmitter,
    SubmissionCommandError,
    SubmissionRequestedWithoutOutput,
    submit_job,
)
