from __future__ import annotations


class ConfigurationError(ValueError):
    """
    A caller-supplied parameter violates a precondition of a simulation
    (bad quantum, zero frames, allocation above maximum, ...).

    Raised before any simulation work is done.
    """
