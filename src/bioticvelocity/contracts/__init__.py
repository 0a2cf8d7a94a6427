"""Pipeline contracts: fail-fast enforcement of input and output invariants.

Contracts fail immediately and loudly when a grid stack cannot be processed
or when the orchestrator does not produce the records it promised.

Key principle:
- Pydantic validates config correctness
- Input contracts validate caller data (InputError)
- Output contracts validate pipeline correctness (ContractViolation)
- Engines turn science edge cases into NaN fields
"""

from bioticvelocity.contracts.failure import ContractViolation, InputError
from bioticvelocity.contracts.base import require, require_input
from bioticvelocity.contracts.stack import (
    assert_stack,
    assert_coordinates,
    assert_elevation,
    assert_selection,
    assert_metric_inputs,
)
from bioticvelocity.contracts.records import assert_result_records

__all__ = [
    "ContractViolation",
    "InputError",
    "require",
    "require_input",
    "assert_stack",
    "assert_coordinates",
    "assert_elevation",
    "assert_selection",
    "assert_metric_inputs",
    "assert_result_records",
]
