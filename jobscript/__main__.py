"""
Command line interface generating and submitting a job script
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from .config import DEFAULT_CONFIG, config
from .render import OutputWriteError, TemplateReadError, generate_job_script
from .request import MissingCommand, resolve_request
from .submit import (
    CommandSubmitter,
    SubmissionCommandError,
    SubmissionRequestedWithoutOutput,
    submit_job,
)
from .version import __version__


def get_parser() -> argparse.ArgumentParser:
    """create the parser for the command line arguments"""
    parser = argparse.ArgumentParser(
        prog="jobscript",
        description="Easily submitting PBS jobs with script template.",
    )

    parser.add_argument("command", help="Command to submit")
    parser.add_argument("files", nargs="*", help="Input files", metavar="FILE")

    for param_obj in DEFAULT_CONFIG:
        param_obj._argparser_add(parser)

    parser.add_argument(
        "-t", "--template", help="Script template", metavar="PATH", default=None
    )
    parser.add_argument(
        "-o", "--outfile", help="Output script", metavar="PATH", default=None
    )
    parser.add_argument(
        "-s", "--submit", action="store_true", help="Submit the job"
    )
    parser.add_argument(
        "--config",
        help="YAML file changing the default parameters",
        metavar="PATH",
        default=None,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Show more information; can be given twice",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def main(args: Optional[Sequence[str]] = None) -> int:
    """generate a job script using command line arguments

    Args:
        args (list of str):
            The command line arguments; uses :code:`sys.argv[1:]` if omitted

    Returns:
        int: The exit code of the program
    """
    # input files may follow the options
    options = get_parser().parse_intermixed_args(args)

    level = [logging.WARNING, logging.INFO, logging.DEBUG][min(options.verbose, 2)]
    logging.basicConfig(level=level, format="%(name)s: %(message)s")

    # determine the defaults
    job_config = config.copy()
    if options.config is not None:
        try:
            job_config.load(options.config)
        except (OSError, ValueError, KeyError) as err:
            print(f"Error generating job script: {err}", file=sys.stderr)
            return 1

    # generate the job script
    try:
        request = resolve_request(
            options.command,
            options.files,
            name=options.name,
            ncpus=options.ncpus,
            mem=options.mem,
            queue=options.queue,
            walltime=options.walltime,
            template=options.template,
            outfile=options.outfile,
            config=job_config,
        )
        generate_job_script(request)
    except (MissingCommand, TemplateReadError, OutputWriteError, ValueError) as err:
        print(f"Error generating job script: {err}", file=sys.stderr)
        return 1

    if not options.submit:
        return 0

    # submit the job script
    try:
        status = submit_job(request, CommandSubmitter(job_config["submit_command"]))
    except SubmissionRequestedWithoutOutput as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    except (SubmissionCommandError, ValueError) as err:
        print(f"Error submitting job: {err}", file=sys.stderr)
        return 1

    print(f"Job submitted with status: {status}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
