"""shpipe: run pipelines of external programs from Python.

Argument vectors are glob-expanded, split into stages on ``|`` and run
with each stage's stdout feeding the next stage's stdin. Results that
outlive a call are kept in a :class:`Stash` and freed in bulk.
"""

from .config import SeparatorMatch, ShellConfig, resolve_config
from .engine import capture, cmd, expand_into, run, strexp, strout
from .files import file_to_strv, strv_to_file
from .globbing import expand
from .models import ErrorKind, Outcome, PipelineResult, Result
from .reaper import ABNORMAL_EXIT
from .stash import Stash
from .strings import dirname, join, split, streq, strjoin, strneq, trim

__all__ = [
    "ABNORMAL_EXIT",
    "ErrorKind",
    "Outcome",
    "PipelineResult",
    "Result",
    "SeparatorMatch",
    "ShellConfig",
    "Stash",
    "__version__",
    "capture",
    "cmd",
    "dirname",
    "expand",
    "expand_into",
    "file_to_strv",
    "join",
    "resolve_config",
    "run",
    "split",
    "streq",
    "strexp",
    "strjoin",
    "strneq",
    "strout",
    "strv_to_file",
    "trim",
]

__version__ = "0.0.1"
