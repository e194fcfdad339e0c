import datetime
from pathlib import Path

import pytest

from jobscript.config import config
from jobscript.request import JobRequest, MissingCommand, resolve_request

NOW = datetime.datetime(2024, 3, 5, 14, 7, 9)


def test_resolve_defaults():
    """Test that absent values are replaced by the defaults."""
    request = resolve_request("echo Hello, world!", now=NOW)

    assert request.command == "echo Hello, world!"
    assert request.files == ()
    assert request.name == "job"
    assert request.ncpus == 1
    assert request.mem is None
    assert request.queue == "batch"
    assert request.walltime == "30:00:00:00"
    assert request.template is None
    assert request.template_source == "built-in"
    assert request.output_path == Path("job_script_20240305140709.sh")
    assert not request.output_explicit


def test_resolve_explicit_values(tmp_path):
    """Test that explicit values win over the defaults."""
    request = resolve_request(
        "python run.py",
        ["a.txt", Path("b.txt")],
        name="simulation",
        ncpus=8,
        mem="16gb",
        queue="long",
        walltime="01:00:00",
        template=tmp_path / "template.sh",
        outfile="run.sh",
    )

    assert request.files == (Path("a.txt"), Path("b.txt"))
    assert request.name == "simulation"
    assert request.ncpus == 8
    assert request.mem == "16gb"
    assert request.queue == "long"
    assert request.walltime == "01:00:00"
    assert request.template_source == str(tmp_path / "template.sh")
    assert request.output_path == Path("run.sh")
    assert request.output_explicit


def test_resolve_empty_values():
    """Test that empty strings are treated like absent values."""
    request = resolve_request(
        "true", name="", mem="", queue="", walltime="", template="", outfile="", now=NOW
    )
    assert request.name == "job"
    assert request.mem is None
    assert request.queue == "batch"
    assert request.walltime == "30:00:00:00"
    assert request.template is None
    assert not request.output_explicit


def test_resolve_config():
    """Test that the defaults are taken from the configuration."""
    c = config.copy()
    c["queue"] = "short"
    c["mem"] = "2gb"
    request = resolve_request("true", queue=None, config=c, now=NOW)
    assert request.queue == "short"
    assert request.mem == "2gb"
    assert resolve_request("true", queue="long", config=c).queue == "long"

    with config(ncpus=2):
        assert resolve_request("true", now=NOW).ncpus == 2
    assert resolve_request("true", now=NOW).ncpus == 1


@pytest.mark.parametrize("command", ["", "   ", "\n", None])
def test_resolve_missing_command(command):
    """Test that a command is required."""
    with pytest.raises(MissingCommand):
        resolve_request(command)


@pytest.mark.parametrize("ncpus", [0, -2, "many"])
def test_resolve_invalid_ncpus(ncpus):
    """Test that the CPU number needs to be positive."""
    with pytest.raises(ValueError):
        resolve_request("true", ncpus=ncpus)


def test_request_immutable():
    """Test that resolved requests cannot be changed."""
    request = resolve_request("true", now=NOW)
    with pytest.raises(AttributeError):
        request.name = "other"
    assert isinstance(request, JobRequest)


@pytest.mark.parametrize("key", ["name", "queue", "walltime"])
def test_resolve_unset_config(key):
    """Test that defaults without a value are rejected."""
    c = config.copy()
    c.mode = "insert"
    c[key] = None
    with pytest.raises(ValueError):
        resolve_request("true", config=c, now=NOW)
    # explicit values do not need a default
    request = resolve_request("true", config=c, now=NOW, **{key: "x"})
    assert getattr(request, key) == "x"
