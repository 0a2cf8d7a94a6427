"""Centralized failure types.

Two kinds of failure leave the engine as exceptions. Everything else
(empty masks, zero mass, square roots of negatives) becomes a NaN field in
the affected record and the run continues.
"""


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    This indicates a bug in pipeline logic, not bad user input. It means a
    stage did not produce the invariants it promised (for example a result
    record without its time columns).

    Key distinction:
    - InputError: Caller supplied a malformed stack or selection
    - ValidationError: Bad configuration (handled by Pydantic)
    - ContractViolation: Pipeline bug (programmer error)
    """
    pass


class InputError(ValueError):
    """Raised when caller input cannot be processed.

    Shape mismatches, non-increasing times, time selections that are not a
    subset of the stack, elevation metrics without elevation data. These
    abort the whole call before any time-step pair is evaluated.
    """
    pass
