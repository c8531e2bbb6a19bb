"""Core modules for the utf8check validator."""

from .checklog import CheckLog  # noqa: F401
from .dfa import ACCEPT, REJECT, pending, step  # noqa: F401
from .report import CheckResult, Tally, hex_dump  # noqa: F401
from .suite import SuiteRunner  # noqa: F401
from .validator import (  # noqa: F401
    StateKind,
    StreamValidator,
    classify,
    is_incomplete,
    is_valid_complete,
    is_valid_cstring,
    validate,
)
