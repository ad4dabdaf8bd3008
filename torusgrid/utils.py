"""Utility functions for torusgrid."""

from __future__ import annotations

import os


def copydoc(fromfunc, sep="\n"):
    """Copy the docstring of function or class.

    https://stackoverflow.com/a/13743316
    """

    def _decorator(func):
        sourcedoc = fromfunc.__doc__
        if func.__doc__ is None:
            func.__doc__ = sourcedoc
        else:
            func.__doc__ = sep.join([sourcedoc, func.__doc__])
        return func

    return _decorator


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean switch from the environment.

    "1"/"true"/"yes"/"on" enable the flag and "0"/"false"/"no"/"off" disable
    it. Unset or unrecognised values fall back to `default`.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in {"0", "false", "no", "off"}:
        return False
    if value in {"1", "true", "yes", "on"}:
        return True
    return default
