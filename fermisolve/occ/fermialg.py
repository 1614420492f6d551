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
Fermi level determination algorithms
====================================

The Fermi level :math:`\varepsilon_F` solves :math:`\Delta N(\varepsilon_F) = 0`
(see :mod:`fermisolve.occ.evaluator`).

- :class:`FermiBisection`: monotonic smearing (Gaussian, Fermi-Dirac). The
  excess is non-decreasing, so a sign-change bracket around the
  integer-occupation guess is bisected down to machine precision.
- :class:`FermiTwoStage`: non-monotonic smearing (Methfessel-Paxton,
  Marzari-Vanderbilt), which can admit several Fermi levels. A Gaussian
  bisection at the same temperature gives a physical starting point, which is
  refined locally on the true excess.
- :class:`FermiZeroTemperature`: zero temperature, used by the other two
  whenever ``temperature == 0``.

Ref:
    M. F. Herbst, A. Levitt, "A robust and efficient line search for
    self-consistent field iterations", https://arxiv.org/abs/2212.07988

All function evaluations are collective reductions, so every k-point
worker runs through the same sequence of trial Fermi levels.
"""

import numpy
from scipy import optimize

from fermisolve import __config__
from fermisolve.lib import logger
from fermisolve.lib.logger import NullTimer
from fermisolve.smearing import Gaussian
from fermisolve.occ.errors import (
    BracketingContractViolation,
    FractionalOccupationError,
    UnattainableOccupationError,
)
from fermisolve.occ.evaluator import excess_n_electrons
from fermisolve.occ.guess import guess_fermi_level_intocc

CHEAP_PATH_FACTOR = getattr(__config__, "CHEAP_PATH_FACTOR", 0.1)
BISECT_MAXITER = getattr(__config__, "BISECT_MAXITER", 500)
SECANT_MAXITER = getattr(__config__, "SECANT_MAXITER", 100)

EPS = numpy.finfo(numpy.float64).eps


class FermiAlgorithm(object):
    r"""Common interface of the Fermi level algorithms."""

    def compute_fermi_level(self, kset, model, tol_n_elec, temperature=None,
                            smearing=None, timer=None):
        r"""Return the Fermi level for ``kset`` and ``model``.

        ``temperature`` and ``smearing`` override the model's values.
        Collective: every worker must call it.
        """
        raise NotImplementedError("Method Not Implemented")

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class FermiZeroTemperature(FermiAlgorithm):
    r"""Integer filling at zero temperature.

    Not meant to be selected directly; :class:`FermiBisection` and
    :class:`FermiTwoStage` delegate here when ``temperature == 0``.
    """

    def compute_fermi_level(self, kset, model, tol_n_elec, temperature=None,
                            smearing=None, timer=None):
        filled_occ = model.filled_occupation
        n_electrons = model.n_electrons
        n_spin = model.n_spin_components
        if n_electrons % (n_spin * filled_occ) != 0:
            raise FractionalOccupationError(
                f"{n_electrons} electrons cannot be attained by filling states with "
                f"occupation {filled_occ}. Typically this indicates that you need to "
                "put a temperature or switch to a calculation with collinear spin "
                "polarization.")

        fermi_level = guess_fermi_level_intocc(kset, model)
        excess = excess_n_electrons(kset, model, fermi_level, 0.0, smearing)
        if abs(excess) > tol_n_elec:
            raise UnattainableOccupationError(
                "Unable to find non-fractional occupations that have the correct "
                f"number of electrons (excess = {excess:.6g}). You should add a temperature.")

        logger.info(model, 'Zero-temperature Fermi level = %.15g', fermi_level)
        return fermi_level


class FermiBisection(FermiAlgorithm):
    r"""Bisection on the excess electron count, for monotonic smearing.

    Parameters
    ----------
    cheap_path_factor : float
        The integer-occupation guess is returned as is when its excess is
        below ``tol_n_elec * cheap_path_factor`` (large-gap systems).
    maxiter : int
        Maximal number of bisection steps.

    After a solve, :attr:`bracket` holds the bracket that was bisected, or
    ``None`` when the guess was accepted directly.
    """

    def __init__(self, cheap_path_factor=CHEAP_PATH_FACTOR, maxiter=BISECT_MAXITER):
        self.cheap_path_factor = cheap_path_factor
        self.maxiter = maxiter
        self.bracket = None

    def compute_fermi_level(self, kset, model, tol_n_elec, temperature=None,
                            smearing=None, timer=None):
        if temperature is None:
            temperature = model.temperature
        if smearing is None:
            smearing = model.smearing
        if timer is None:
            timer = NullTimer()
        if temperature == 0:
            return FermiZeroTemperature().compute_fermi_level(
                kset, model, tol_n_elec, temperature, smearing, timer)

        def excess(fermi_level):
            return excess_n_electrons(kset, model, fermi_level, temperature, smearing)

        self.bracket = None
        fermi_int = guess_fermi_level_intocc(kset, model)
        excess_int = excess(fermi_int)
        if excess_int == 0 or abs(excess_int) < tol_n_elec * self.cheap_path_factor:
            logger.info(model, 'Integer-occupation guess accepted: eF = %.15g  excess = %.3g',
                        fermi_int, excess_int)
            return fermi_int

        if excess_int < 0:
            min_eps = fermi_int
            max_eps = kset.max_eigenvalue() + 1
        else:
            min_eps = kset.min_eigenvalue() - 1
            max_eps = fermi_int
        self.bracket = (min_eps, max_eps)

        excess_min = excess(min_eps)
        excess_max = excess(max_eps)
        logger.debug(model, 'Bisection bracket [%.15g, %.15g]  excess = (%.3g, %.3g)',
                     min_eps, max_eps, excess_min, excess_max)
        if not excess_min < 0 < excess_max:
            raise BracketingContractViolation(
                f"Excess electron count does not change sign on [{min_eps}, {max_eps}] "
                f"(excess = {excess_min}, {excess_max}). Is {smearing} really monotonic?")

        with timer("FermiBisection"):
            fermi_level = optimize.bisect(excess, min_eps, max_eps, xtol=EPS,
                                          maxiter=self.maxiter)

        residual = excess(fermi_level)
        if abs(residual) > tol_n_elec:
            raise BracketingContractViolation(
                f"Bisection converged to eF = {fermi_level} with excess {residual}, "
                f"above tol_n_elec = {tol_n_elec}.")

        logger.info(model, 'Bisection Fermi level = %.15g  excess = %.3g',
                    fermi_level, residual)
        return fermi_level


class FermiTwoStage(FermiAlgorithm):
    r"""Gaussian-smearing bisection followed by a local refinement.

    The local stage runs secant steps on the true excess from the Gaussian
    guess and switches to :func:`scipy.optimize.brentq` (secant and inverse
    quadratic steps safeguarded by bisection) as soon as two iterates bracket
    a sign change.

    Parameters
    ----------
    maxiter : int
        Maximal number of secant steps before a bracket is found.
    cheap_path_factor : float
        Refinement stops at the first iterate with an excess below
        ``tol_n_elec * cheap_path_factor``. Set it to 0 to refine down to
        machine precision. Also passed to the Gaussian bisection.
    """

    def __init__(self, maxiter=SECANT_MAXITER, cheap_path_factor=CHEAP_PATH_FACTOR):
        self.maxiter = maxiter
        self.cheap_path_factor = cheap_path_factor
        self.guess = None

    def compute_fermi_level(self, kset, model, tol_n_elec, temperature=None,
                            smearing=None, timer=None):
        if temperature is None:
            temperature = model.temperature
        if smearing is None:
            smearing = model.smearing
        if timer is None:
            timer = NullTimer()
        if temperature == 0:
            return FermiZeroTemperature().compute_fermi_level(
                kset, model, tol_n_elec, temperature, smearing, timer)

        with timer("FermiTwoStage.guess"):
            self.guess = FermiBisection(cheap_path_factor=self.cheap_path_factor).compute_fermi_level(
                kset, model, tol_n_elec, temperature, Gaussian(), timer)
        logger.debug(model, 'Gaussian-smearing guess eF = %.15g', self.guess)

        def excess(fermi_level):
            return excess_n_electrons(kset, model, fermi_level, temperature, smearing)

        with timer("FermiTwoStage.refine"):
            fermi_level = secant_bracketed(excess, self.guess, step=1e-3 * temperature,
                                           xtol=EPS, ftol=tol_n_elec * self.cheap_path_factor,
                                           maxiter=self.maxiter)
        logger.info(model, 'Two-stage Fermi level = %.15g  excess = %.3g',
                    fermi_level, excess(fermi_level))
        return fermi_level


def secant_bracketed(func, x0, step, xtol=EPS, ftol=0.0, maxiter=SECANT_MAXITER):
    r"""Local root of ``func`` started at ``x0``.

    Secant iterations run from ``(x0, x0 + step)`` and stop at the first
    iterate with ``|func| <= ftol``. Once two consecutive iterates bracket a
    sign change the root is polished with :func:`scipy.optimize.brentq`.

    When the secant stalls (flat ``func``) or ``maxiter`` is exhausted, the
    iterate with the smallest ``|func|`` is returned; the caller judges the
    residual.
    """
    f0 = func(x0)
    if abs(f0) <= ftol:
        return x0
    best_x, best_f = x0, f0
    x1 = x0 + step
    f1 = func(x1)

    for _ in range(maxiter):
        if abs(f1) < abs(best_f):
            best_x, best_f = x1, f1
        if f1 == 0 or abs(f1) <= ftol:
            return x1
        if numpy.sign(f0) != numpy.sign(f1):
            a, b = min(x0, x1), max(x0, x1)
            return optimize.brentq(func, a, b, xtol=xtol)
        if f1 == f0:
            break
        x2 = x1 - f1 * (x1 - x0) / (f1 - f0)
        if not numpy.isfinite(x2):
            break
        if abs(x2 - x1) <= xtol + 4 * EPS * abs(x1):
            return x2
        x0, f0 = x1, f1
        x1, f1 = x2, func(x2)
    else:
        if abs(f1) < abs(best_f):
            best_x, best_f = x1, f1

    return best_x


def default_fermialg(smearing):
    r"""Bisection for monotonic smearing, two-stage otherwise."""
    if getattr(smearing, "monotonic", False):
        return FermiBisection()
    return FermiTwoStage()
