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
Occupation numbers and Fermi level
==================================

Simple usage::

    >>> from fermisolve import occ
    >>> kset = occ.KpointEigenvalues([[-1.0, 0.5, 2.0], [-1.0, 0.5, 2.0]], [0.5, 0.5])
    >>> model = occ.Model(n_electrons=2, temperature=0.01, smearing="fermi-dirac")
    >>> occupation, fermi_level = occ.solve(kset, model, tol_n_elec=1e-8)
"""

from fermisolve.occ.errors import (
    BracketingContractViolation,
    FermiLevelError,
    FractionalOccupationError,
    InsufficientBandsError,
    PartialOccupationError,
    UnattainableOccupationError,
)
from fermisolve.occ.model import KpointEigenvalues, Model, OccupationResult
from fermisolve.occ.evaluator import (
    compute_occupation,
    excess_n_electrons,
    excess_n_electrons_derivative,
)
from fermisolve.occ.guess import guess_fermi_level_intocc
from fermisolve.occ.fermialg import (
    FermiAlgorithm,
    FermiBisection,
    FermiTwoStage,
    FermiZeroTemperature,
    default_fermialg,
)
from fermisolve.occ.occupation import solve, validate_fully_filled
