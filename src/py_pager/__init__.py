"""py-pager — a page replacement simulator.

Re-exports public symbols so callers can write::

    from py_pager import PolicyKind, compute_faults
"""

from py_pager.config import DEFAULT_CONFIG, ConfigError, SimulatorConfig
from py_pager.logging import LogEntry, Logger, LogLevel
from py_pager.membership import contains
from py_pager.policies import (
    FIFOPolicy,
    LRUPolicy,
    OPTPolicy,
    PolicyKind,
    ReplacementPolicy,
    compare_policies,
    compute_faults,
    get_policy,
)
from py_pager.refstring import (
    format_reference_string,
    generate,
    normalize,
    parse_reference_string,
)
from py_pager.session import Session

__all__ = [
    "DEFAULT_CONFIG",
    "ConfigError",
    "FIFOPolicy",
    "LRUPolicy",
    "LogEntry",
    "LogLevel",
    "Logger",
    "OPTPolicy",
    "PolicyKind",
    "ReplacementPolicy",
    "Session",
    "SimulatorConfig",
    "compare_policies",
    "compute_faults",
    "contains",
    "format_reference_string",
    "generate",
    "get_policy",
    "normalize",
    "parse_reference_string",
]
