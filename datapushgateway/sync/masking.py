"""Redaction of credential-bearing arguments before they reach the logs.

Masking only affects what is logged. The tool always receives the real
arguments.

Examples
--------
>>> mask_arguments(["P4PASSWD=hunter2", "sync"])
['P4PASSWD=******', 'sync']
>>> mask_arguments(["-P", "hunter2", "opened"])
['-P', '******', 'opened']

"""

from __future__ import annotations

import re
import typing as typ

REDACTION_MARKER = "******"

_SENSITIVE_NAME = re.compile(
    r"P4(?:PORT|USER|CLIENT|TICKETS|TRUST|PASSWD)", re.IGNORECASE
)
# Global options whose following argument is a credential.
_SENSITIVE_FLAGS = frozenset({"-P"})


def is_sensitive_name(name: str) -> bool:
    """Return whether an argument or variable name carries a credential."""
    return _SENSITIVE_NAME.search(name) is not None


def mask_argument(argument: str) -> str:
    """Mask the value of a ``NAME=value`` argument with a sensitive name."""
    name, separator, _ = argument.partition("=")
    if not separator or not is_sensitive_name(name):
        return argument
    return f"{name}={REDACTION_MARKER}"


def mask_arguments(arguments: typ.Iterable[str]) -> list[str]:
    """Return a copy of ``arguments`` safe to log."""
    masked: list[str] = []
    hide_next = False
    for argument in arguments:
        if hide_next:
            masked.append(REDACTION_MARKER)
            hide_next = False
            continue
        if argument in _SENSITIVE_FLAGS:
            hide_next = True
            masked.append(argument)
            continue
        masked.append(mask_argument(argument))
    return masked


def mask_environment(environment: typ.Mapping[str, str]) -> list[str]:
    """Render environment overrides as masked ``NAME=value`` strings."""
    pairs = sorted(environment.items())
    return mask_arguments(f"{name}={value}" for name, value in pairs)
