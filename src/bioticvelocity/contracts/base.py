"""Base contract enforcement utilities.

require() guards pipeline invariants, require_input() guards caller input.
Both are fail-fast: no recovery, no fallback, no silence.
"""

from bioticvelocity.contracts.failure import ContractViolation, InputError


def require(condition: bool, message: str) -> None:
    """Enforce a pipeline contract.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation (for debugging).

    Raises
    ------
    ContractViolation
        If condition is False. This indicates a bug in pipeline logic.

    Examples
    --------
    >>> require("fromTime" in record, "Record contract: missing 'fromTime'")
    """
    if not condition:
        raise ContractViolation(message)


def require_input(condition: bool, message: str) -> None:
    """Enforce a precondition on caller-supplied data.

    Raises
    ------
    InputError
        If condition is False.
    """
    if not condition:
        raise InputError(message)
