# src/srflp/instance.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union
import json
import sys
import numpy as np


class InstanceValidationError(ValueError):
    """Instance data that is well-formed JSON but breaks the SRFLP invariants."""


@dataclass(eq=False)
class Instance:
    nb_departments: int
    lengths: np.ndarray  # shape: (departments,)
    flows: np.ndarray    # shape: (departments, departments)

    def __post_init__(self) -> None:
        self.lengths = np.asarray(self.lengths, dtype=np.int64).reshape(-1)
        self.flows = np.asarray(self.flows, dtype=np.int64)
        if self.flows.size == 0 and self.flows.ndim != 2:
            self.flows = self.flows.reshape(0, 0)

    @property
    def n(self) -> int: return int(self.nb_departments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instance):
            return NotImplemented
        return (
            self.n == other.n
            and np.array_equal(self.lengths, other.lengths)
            and np.array_equal(self.flows, other.flows)
        )

    def validate(self) -> "Instance":
        n = self.nb_departments
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 0:
            raise InstanceValidationError(f"nb_departments must be a non-negative integer, got {n!r}")
        if self.lengths.shape != (n,):
            raise InstanceValidationError(
                f"lengths must have {n} entries, got {self.lengths.shape[0]}"
            )
        if self.flows.shape != (n, n):
            raise InstanceValidationError(
                f"flows must be a {n}x{n} matrix, got shape {self.flows.shape}"
            )
        if n == 0:
            return self
        if np.any(np.diag(self.flows) != 0):
            raise InstanceValidationError("flows must have a zero diagonal")
        if not np.array_equal(self.flows, self.flows.T):
            i, j = np.argwhere(self.flows != self.flows.T)[0]
            raise InstanceValidationError(
                f"flows must be symmetric: flows[{i}][{j}]={self.flows[i, j]} "
                f"but flows[{j}][{i}]={self.flows[j, i]}"
            )
        if np.any(self.flows < 0):
            raise InstanceValidationError("flows must be non-negative")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nb_departments": self.n,
            "lengths": [int(x) for x in self.lengths],
            "flows": [[int(x) for x in row] for row in self.flows],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: Any) -> "Instance":
        if not isinstance(data, dict):
            raise InstanceValidationError("instance must be a JSON object")
        missing = [k for k in ("nb_departments", "lengths", "flows") if k not in data]
        if missing:
            raise InstanceValidationError(f"instance is missing fields: {', '.join(missing)}")
        n = data["nb_departments"]
        if isinstance(n, bool) or not isinstance(n, int):
            raise InstanceValidationError(f"nb_departments must be an integer, got {n!r}")
        lengths, flows = data["lengths"], data["flows"]
        if not isinstance(lengths, list) or not _all_ints(lengths):
            raise InstanceValidationError("lengths must be a list of integers")
        if not isinstance(flows, list) or not all(isinstance(r, list) and _all_ints(r) for r in flows):
            raise InstanceValidationError("flows must be a list of integer rows")
        if any(len(r) != len(flows) for r in flows):
            raise InstanceValidationError("flows must be a square matrix")
        try:
            lengths_arr = np.array(lengths, dtype=np.int64)
            flows_arr = np.array(flows, dtype=np.int64).reshape(len(flows), len(flows))
        except OverflowError as e:
            raise InstanceValidationError("values must fit in 64-bit integers") from e
        return cls(nb_departments=n, lengths=lengths_arr, flows=flows_arr).validate()


def _all_ints(values: list) -> bool:
    return all(isinstance(x, int) and not isinstance(x, bool) for x in values)


def read_instance(path: Union[str, Path]) -> Instance:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InstanceValidationError(f"{path}: invalid JSON ({e})") from e
    try:
        return Instance.from_dict(data)
    except InstanceValidationError as e:
        raise InstanceValidationError(f"{path}: {e}") from e


def write_instance(instance: Instance, path: Optional[Union[str, Path]] = None) -> None:
    """Write ``instance`` as JSON to ``path``, or to stdout when no path is given."""
    text = instance.to_json()
    if path is None:
        sys.stdout.write(text + "\n")
        return
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def layout_cost(instance: Instance, order: Sequence[int]):
    """Sum of flow times center distance for a complete row ``order``.

    Centers are tracked at twice their coordinate so odd lengths stay exact;
    the result is an ``int`` when integral and a ``float`` otherwise.
    """
    order = [int(d) for d in order]
    if sorted(order) != list(range(instance.n)):
        raise ValueError(f"order must be a permutation of 0..{instance.n - 1}, got {order}")
    # python ints: flow * distance may exceed int64
    lengths = [int(x) for x in instance.lengths]
    flows = instance.flows.tolist()
    centers2 = [0] * instance.n
    start = 0
    for d in order:
        centers2[d] = 2 * start + lengths[d]
        start += lengths[d]
    total2 = 0
    for i in range(instance.n):
        for j in range(i + 1, instance.n):
            total2 += flows[i][j] * abs(centers2[i] - centers2[j])
    return _halve(total2)


def _halve(doubled: int):
    return doubled // 2 if doubled % 2 == 0 else doubled / 2
