#
# @ 2023. Triad National Security, LLC. All rights reserved.
#
# This program was produced under U.S. Government contract 89233218CNA000001
# for Los Alamos National Laboratory (LANL), which is operated by Triad
# National Security, LLC for the U.S. Department of Energy/National Nuclear
# Security Administration. All rights in the program are reserved by Triad
# National Security, LLC, and the U.S. Department of Energy/National Nuclear
# Security Administration. The Government is granted for itself and others acting
# on its behalf a nonexclusive, paid-up, irrevocable worldwide license in this
# material to reproduce, prepare derivative works, distribute copies to the
# public, perform publicly and display publicly, and to permit others to do so.
#
# Author: Yu Zhang <zhy@lanl.gov>
#


r"""
Inputs and outputs of the occupation solver.

- :class:`Model`: electron count, spin, temperature, smearing.
- :class:`KpointEigenvalues`: the eigenvalues owned by this worker, one
  ascending array per (k-point, spin) block, with integration weights and
  the :class:`~fermisolve.__mpi__.Reducer` connecting the workers.
- :class:`OccupationResult`: occupations and Fermi level.
"""

import sys
from dataclasses import dataclass, field
from typing import List, Optional

import numpy

from fermisolve import __config__
from fermisolve import smearing as smearing_lib
from fermisolve.__mpi__ import LocalReducer

VERBOSE = getattr(__config__, "VERBOSE", 3)


class Model(object):
    r"""
    Electronic parameters entering the occupation problem.

    Parameters
    ----------
    n_electrons : float
        Target electron count (may be non-integer).
    temperature : float
        Smearing temperature :math:`\theta \ge 0`, in energy units.
        ``0`` is the athermal limit.
    smearing : :class:`~fermisolve.smearing.SmearingFunction` or str, optional
        Defaults to :class:`~fermisolve.smearing.NoSmearing` at zero
        temperature and :class:`~fermisolve.smearing.FermiDirac` otherwise.
    n_spin_components : int
        1 (spin-restricted) or 2 (collinear spin).
    filled_occupation : float, optional
        Maximal occupation of one state. Defaults to 2 for one spin
        component and 1 for two.
    fermi_level : float, optional
        Fixed Fermi level; when set no root finding takes place.
    """

    def __init__(self, n_electrons, temperature=0.0, smearing=None,
                 n_spin_components=1, filled_occupation=None, fermi_level=None,
                 verbose=VERBOSE, stdout=sys.stdout):
        if temperature < 0:
            raise ValueError(f"temperature must be non-negative, got {temperature}")
        if n_spin_components not in (1, 2):
            raise ValueError(f"n_spin_components must be 1 or 2, got {n_spin_components}")
        if n_electrons < 0:
            raise ValueError(f"n_electrons must be non-negative, got {n_electrons}")

        if filled_occupation is None:
            filled_occupation = 2 if n_spin_components == 1 else 1
        if filled_occupation <= 0:
            raise ValueError(f"filled_occupation must be positive, got {filled_occupation}")

        if smearing is None:
            smearing = smearing_lib.NoSmearing() if temperature == 0 else smearing_lib.FermiDirac()
        elif isinstance(smearing, str):
            smearing = smearing_lib.smearing_from_name(smearing)

        self.n_electrons = n_electrons
        self.temperature = float(temperature)
        self.smearing = smearing
        self.n_spin_components = n_spin_components
        self.filled_occupation = filled_occupation
        self.fermi_level = fermi_level
        self.verbose = verbose
        self.stdout = stdout

    def dump_flags(self):
        from fermisolve.lib import logger
        logger.info(self, '\n******** %s ********', self.__class__)
        logger.info(self, 'n_electrons = %s', self.n_electrons)
        logger.info(self, 'n_spin_components = %d', self.n_spin_components)
        logger.info(self, 'filled_occupation = %s', self.filled_occupation)
        logger.info(self, 'temperature = %g', self.temperature)
        logger.info(self, 'smearing = %s', self.smearing)
        if self.fermi_level is not None:
            logger.info(self, 'fixed fermi_level = %.15g', self.fermi_level)
        return self


class KpointEigenvalues(object):
    r"""
    Eigenvalues of the k-points owned by this worker.

    Parameters
    ----------
    eigenvalues : sequence of 1D array_like
        One ascending array of band energies per (k-point, spin) block. The
        number of bands may differ between blocks.
    weights : array_like
        Integration weight of each block.
    reducer : :class:`~fermisolve.__mpi__.Reducer`, optional
        Collective reductions over the workers. Defaults to a single worker.

    The arrays are copied and stored read-only.
    """

    def __init__(self, eigenvalues, weights, reducer=None):
        kpts = []
        for ik, eps_k in enumerate(eigenvalues):
            eps_k = numpy.array(eps_k, dtype=float)
            if eps_k.ndim != 1:
                raise ValueError(f"eigenvalues of k-point {ik} must be 1D, got shape {eps_k.shape}")
            if eps_k.size > 1 and numpy.any(numpy.diff(eps_k) < 0):
                raise ValueError(f"eigenvalues of k-point {ik} are not sorted ascending")
            eps_k.setflags(write=False)
            kpts.append(eps_k)

        weights = numpy.array(weights, dtype=float).reshape(-1)
        if weights.size != len(kpts):
            raise ValueError(f"got {weights.size} weights for {len(kpts)} k-points")
        weights.setflags(write=False)

        self.eigenvalues = tuple(kpts)
        self.weights = weights
        self.reducer = reducer if reducer is not None else LocalReducer()

    @property
    def nkpts(self):
        return len(self.eigenvalues)

    def __len__(self):
        return self.nkpts

    def band_counts(self):
        return numpy.array([eps_k.size for eps_k in self.eigenvalues], dtype=float)

    def weighted_ksum(self, values):
        r"""Global :math:`\sum_k w_k v_k` over all workers."""
        local = sum(w * v for w, v in zip(self.weights, values))
        return self.reducer.sum(local)

    def min_eigenvalue(self):
        local = min((eps_k[0] for eps_k in self.eigenvalues if eps_k.size), default=numpy.inf)
        return self.reducer.min(local)

    def max_eigenvalue(self):
        local = max((eps_k[-1] for eps_k in self.eigenvalues if eps_k.size), default=-numpy.inf)
        return self.reducer.max(local)


@dataclass
class OccupationResult:
    r"""Occupations and Fermi level returned by :func:`~fermisolve.occ.solve`.

    Unpacks as ``occupation, fermi_level = result``.
    """

    occupation: List[numpy.ndarray]
    fermi_level: float
    excess: Optional[float] = None
    dexcess: Optional[float] = None
    fermialg: Optional[object] = None
    warnings: List[str] = field(default_factory=list)

    def __iter__(self):
        yield self.occupation
        yield self.fermi_level

    @property
    def unphysical(self):
        r"""Whether the solve finished with a non-fatal warning."""
        return len(self.warnings) > 0
