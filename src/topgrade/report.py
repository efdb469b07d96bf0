from __future__ import annotations

"""Step result log.

CONTRACT
- Inputs: optional (name, succeeded) pairs from each executed step
- Outputs:
  - data(): records in the order they were pushed
  - all_succeeded(): True iff no record failed (True when empty)
- Invariants:
  - Append-only; None (a skipped step) is never recorded
  - Duplicate names are kept as separate records
"""

from typing import NamedTuple


class StepRecord(NamedTuple):
    name: str
    succeeded: bool


class Report:
    def __init__(self) -> None:
        self._data: list[StepRecord] = []

    def push_result(self, result: tuple[str, bool] | None) -> None:
        if result is None:
            return
        name, succeeded = result
        self._data.append(StepRecord(name, bool(succeeded)))

    def data(self) -> list[StepRecord]:
        return list(self._data)

    def is_empty(self) -> bool:
        return not self._data

    def all_succeeded(self) -> bool:
        return all(record.succeeded for record in self._data)

    def __len__(self) -> int:
        return len(self._data)
