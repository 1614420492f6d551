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
Errors raised while determining occupations and the Fermi level.

All of them are raised from globally reduced quantities, so every k-point
worker raises the same error at the same point of the solve.
"""


class FermiLevelError(RuntimeError):
    r"""Base class of the occupation / Fermi level errors."""


class InsufficientBandsError(FermiLevelError):
    r"""Not enough bands to hold the requested electrons, even fully filled."""


class BracketingContractViolation(FermiLevelError, AssertionError):
    r"""The excess electron count does not change sign on the bisection
    bracket, or bisection did not reach the electron-count tolerance.

    Raised only when the smearing function is tagged monotonic but is not.
    """


class FractionalOccupationError(FermiLevelError):
    r"""Zero temperature, but the electron count is not a multiple of the
    filled occupation times the number of spin components."""


class UnattainableOccupationError(FermiLevelError):
    r"""Zero temperature, but uniform integer filling over the k-points does
    not give the right electron count."""


class PartialOccupationError(FermiLevelError):
    r"""A k-point carries a partially occupied state where full occupation
    is required."""

    def __init__(self, msg, kpoint=None, occupation=None):
        super().__init__(msg)
        self.kpoint = kpoint
        self.occupation = occupation
