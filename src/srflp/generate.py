# src/srflp/generate.py
"""Synthetic SRFLP instances with clustered structure.

Departments are split into clusters of near-equal size. Lengths are drawn
around one centroid per cluster; flows come from a latent 1-D "flow
position" per department, the flow between two departments being the gap
between their positions. Sampling order is fixed so that a seed always
yields the same instance.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional

import numpy as np

from .instance import Instance
from .rng import SEED_BITS, seeded_rng


class GenerationConfigError(ValueError):
    """Raised for parameter sets that cannot produce an instance."""


@dataclass(frozen=True)
class GenerationParameters:
    seed: Optional[int] = None
    nb_departments: int = 10
    nb_clusters: int = 3
    min_length: int = 100
    max_length: int = 10000
    length_std_dev: int = 100
    min_flow_position: int = 100
    max_flow_position: int = 10000
    flow_position_std_dev: int = 100

    def validate(self) -> "GenerationParameters":
        if self.seed is not None and not 0 <= self.seed < (1 << SEED_BITS):
            raise GenerationConfigError(f"seed must lie in [0, 2**{SEED_BITS}), got {self.seed}")
        if self.nb_departments < 0:
            raise GenerationConfigError(f"nb_departments must be >= 0, got {self.nb_departments}")
        if self.nb_clusters < 1:
            raise GenerationConfigError(f"nb_clusters must be >= 1, got {self.nb_clusters}")
        if self.min_length < 0:
            raise GenerationConfigError(f"min_length must be >= 0, got {self.min_length}")
        if self.length_std_dev < 0:
            raise GenerationConfigError(f"length_std_dev must be >= 0, got {self.length_std_dev}")
        if self.flow_position_std_dev < 0:
            raise GenerationConfigError(
                f"flow_position_std_dev must be >= 0, got {self.flow_position_std_dev}"
            )
        if self.min_length > self.max_length:
            raise GenerationConfigError(
                f"min_length ({self.min_length}) exceeds max_length ({self.max_length})"
            )
        if self.min_flow_position > self.max_flow_position:
            raise GenerationConfigError(
                f"min_flow_position ({self.min_flow_position}) exceeds "
                f"max_flow_position ({self.max_flow_position})"
            )
        return self

    def normalised(self) -> "GenerationParameters":
        """Shift the length range up so that ``min_length >= length_std_dev``."""
        if self.min_length < self.length_std_dev:
            shift = self.length_std_dev - self.min_length
            return replace(self, min_length=self.length_std_dev, max_length=self.max_length + shift)
        return self


def cluster_sizes(nb_departments: int, nb_clusters: int) -> List[int]:
    if nb_clusters < 1:
        raise GenerationConfigError(f"nb_clusters must be >= 1, got {nb_clusters}")
    base, extra = divmod(nb_departments, nb_clusters)
    return [base + 1 if i < extra else base for i in range(nb_clusters)]


def cluster_members(sizes: List[int]) -> List[range]:
    """Contiguous department index blocks, cluster 0 first."""
    out: List[range] = []
    start = 0
    for size in sizes:
        out.append(range(start, start + size))
        start += size
    return out


def _sample_rounded(rng: np.random.Generator, centroid: int, std_dev: float, size: int) -> np.ndarray:
    return np.rint(rng.normal(float(centroid), float(std_dev), size=size)).astype(np.int64)


def generate_lengths(rng: np.random.Generator, params: GenerationParameters, sizes: List[int]) -> np.ndarray:
    lengths: List[np.ndarray] = []
    for size in sizes:
        centroid = int(rng.integers(params.min_length, params.max_length, endpoint=True))
        lengths.append(_sample_rounded(rng, centroid, params.length_std_dev, size))
    if not lengths:
        return np.zeros(0, dtype=np.int64)
    return np.concatenate(lengths)


def _flow_positions(rng: np.random.Generator, params: GenerationParameters, size: int) -> np.ndarray:
    centroid = int(rng.integers(params.min_flow_position, params.max_flow_position, endpoint=True))
    return _sample_rounded(rng, centroid, params.flow_position_std_dev, size)


def generate_flows(rng: np.random.Generator, params: GenerationParameters, sizes: List[int]) -> np.ndarray:
    n = sum(sizes)
    members = cluster_members(sizes)
    flows = np.zeros((n, n), dtype=np.int64)
    for a, block_a in enumerate(members):
        positions_a = _flow_positions(rng, params, len(block_a))
        for b in range(a, len(members)):
            block_b = members[b]
            # the diagonal block reuses the positions drawn for ``a``
            positions_b = positions_a if b == a else _flow_positions(rng, params, len(block_b))
            block = np.abs(positions_a[:, None] - positions_b[None, :])
            flows[block_a.start:block_a.stop, block_b.start:block_b.stop] = block
            flows[block_b.start:block_b.stop, block_a.start:block_a.stop] = block.T
    return flows


def generate_instance(params: GenerationParameters, rng: Optional[np.random.Generator] = None) -> Instance:
    """Build one instance; ``rng`` defaults to a generator keyed to ``params.seed``."""
    params = params.validate().normalised()
    if rng is None:
        rng = seeded_rng(params.seed)
    sizes = cluster_sizes(params.nb_departments, params.nb_clusters)
    lengths = generate_lengths(rng, params, sizes)
    flows = generate_flows(rng, params, sizes)
    return Instance(nb_departments=params.nb_departments, lengths=lengths, flows=flows)
