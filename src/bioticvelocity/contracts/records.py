"""Result record contract.

Enforces the guarantee that the orchestrator returns one well-formed record
per evaluated time-step pair.
"""

import math

from bioticvelocity.contracts.base import require


def assert_result_records(records: list, n_pairs: int, required_fields: list) -> None:
    """Enforce result record contract.

    Called after all pairs are assembled. Verifies record count, the
    universal time columns, and the field group of every requested metric.

    We do NOT validate the scientific correctness of the values (NaN is a
    legitimate value for any metric field). We only check structure.

    Parameters
    ----------
    records : list of dict
        Output of MetricOrchestrator.run()

    n_pairs : int
        Number of time-step pairs that were evaluated

    required_fields : list of str
        Metric fields every record must carry

    Raises
    ------
    ContractViolation
        If structural requirements are violated
    """
    require(
        len(records) == n_pairs,
        f"Record contract violated: {len(records)} records for {n_pairs} time-step pairs"
    )

    previous_to = None
    for i, record in enumerate(records):
        for col in ("fromTime", "toTime", "timeSpan"):
            require(
                col in record and not math.isnan(record[col]),
                f"Record contract violated: record {i} missing '{col}'"
            )
        require(
            record["timeSpan"] > 0,
            f"Record contract violated: record {i} has timeSpan {record['timeSpan']}"
        )
        require(
            previous_to is None or record["fromTime"] == previous_to,
            f"Record contract violated: record {i} does not start where record {i - 1} ended"
        )
        previous_to = record["toTime"]

        missing = [f for f in required_fields if f not in record]
        require(
            not missing,
            f"Record contract violated: record {i} missing fields {missing}"
        )
