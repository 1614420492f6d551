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
Occupation service: Fermi level and occupations for given eigenvalues.

:func:`solve` is called once per SCF iteration with the current eigenvalues.
:func:`validate_fully_filled` is for callers that only support insulators
with fully occupied bands.
"""

import numpy

from fermisolve import __config__
from fermisolve.lib import logger
from fermisolve.lib.logger import NullTimer
from fermisolve.occ.errors import InsufficientBandsError, PartialOccupationError
from fermisolve.occ.evaluator import (
    compute_occupation,
    excess_n_electrons,
    excess_n_electrons_derivative,
)
from fermisolve.occ.fermialg import EPS, default_fermialg
from fermisolve.occ.model import OccupationResult

FERMI_TOL_N_ELEC = getattr(__config__, "FERMI_TOL_N_ELEC", 1e-6)
FULL_OCC_ATOL = getattr(__config__, "FULL_OCC_ATOL", 1e-12)

LARGE_EXCESS = "large_excess"
NEGATIVE_DOS = "negative_dos"


def solve(kset, model, tol_n_elec=None, fermialg=None, timer=None, dexcess=None):
    r"""
    Occupations and Fermi level for the eigenvalues in ``kset``.

    Parameters
    ----------
    kset : :class:`~fermisolve.occ.model.KpointEigenvalues`
        Eigenvalues owned by this worker.
    model : :class:`~fermisolve.occ.model.Model`
        Electron count, temperature, smearing, optional fixed Fermi level.
    tol_n_elec : float, optional
        Accuracy on the electron count, defaults to ``FERMI_TOL_N_ELEC``.
    fermialg : :class:`~fermisolve.occ.fermialg.FermiAlgorithm`, optional
        Overrides :func:`~fermisolve.occ.fermialg.default_fermialg`.
    timer : :class:`~fermisolve.lib.logger.Timer`, optional
        Timing observer.
    dexcess : callable, optional
        ``dexcess(fermi_level)`` returning the derivative of the excess
        electron count. Defaults to the analytic derivative of the smearing
        function.

    Returns
    -------
    :class:`~fermisolve.occ.model.OccupationResult`

    Raises
    ------
    InsufficientBandsError
        Not enough bands to hold ``model.n_electrons``.
    FractionalOccupationError, UnattainableOccupationError
        Zero temperature without an integer-filling solution.
    BracketingContractViolation
        A smearing function tagged monotonic is not.

    Large residual electron counts and a negative density of states at the
    Fermi level are only warned about; see ``OccupationResult.warnings``.
    Collective: every worker must call it.
    """
    if tol_n_elec is None:
        tol_n_elec = FERMI_TOL_N_ELEC
    if tol_n_elec <= 0:
        raise ValueError(f"tol_n_elec must be positive, got {tol_n_elec}")
    if timer is None:
        timer = NullTimer()

    temperature = model.temperature
    smearing = model.smearing
    filled_occ = model.filled_occupation

    if model.fermi_level is not None:
        fermi_level = model.fermi_level
        logger.info(model, 'Using fixed Fermi level %.15g', fermi_level)
        occupation = compute_occupation(kset, fermi_level, temperature, smearing, filled_occ)
        return OccupationResult(occupation, fermi_level)

    max_n_electrons = filled_occ * kset.weighted_ksum(kset.band_counts())
    if max_n_electrons < model.n_electrons - tol_n_elec:
        raise InsufficientBandsError(
            "Could not obtain required number of electrons by filling every state "
            f"({max_n_electrons} < {model.n_electrons}). Increase n_bands.")

    if fermialg is None:
        fermialg = default_fermialg(smearing)
    logger.debug(model, 'Fermi level algorithm: %s', fermialg)

    with timer("compute_fermi_level"):
        fermi_level = fermialg.compute_fermi_level(kset, model, tol_n_elec, temperature,
                                                   smearing, timer)

    excess = excess_n_electrons(kset, model, fermi_level, temperature, smearing)
    if dexcess is None:
        dexcess_value = excess_n_electrons_derivative(kset, model, fermi_level,
                                                      temperature, smearing)
    else:
        dexcess_value = dexcess(fermi_level)

    warnings = []
    if abs(excess) > tol_n_elec:
        logger.warn(model, 'Large deviation of electron count in compute_occupation '
                    '(excess=%.6g). This may lead to an unphysical solution. Try '
                    'decreasing the temperature or using a different smearing function.',
                    excess)
        warnings.append(LARGE_EXCESS)
    if dexcess_value < -numpy.sqrt(EPS):
        logger.warn(model, 'Negative density of states (electron count versus Fermi '
                    'level derivative = %.6g) encountered in compute_occupation. This '
                    'may lead to an unphysical solution. Try decreasing the temperature '
                    'or using a different smearing function.', dexcess_value)
        warnings.append(NEGATIVE_DOS)

    occupation = compute_occupation(kset, fermi_level, temperature, smearing, filled_occ)
    logger.note(model, 'Fermi level = %.15g  excess electrons = %.3g', fermi_level, excess)
    return OccupationResult(occupation, fermi_level, excess=excess, dexcess=dexcess_value,
                            fermialg=fermialg, warnings=warnings)


def validate_fully_filled(occupation, filled_occ, atol=FULL_OCC_ATOL):
    r"""Check that every state in ``occupation`` holds ``filled_occ`` electrons.

    Raises :class:`~fermisolve.occ.errors.PartialOccupationError` for the first
    k-point with a partially occupied or empty state.
    """
    for ik, occ_k in enumerate(occupation):
        occ_k = numpy.asarray(occ_k)
        if not numpy.all(numpy.abs(occ_k - filled_occ) <= atol):
            raise PartialOccupationError(
                f"Only full occupation is supported, but k-point {ik} has partial "
                f"occupation {occ_k}.", kpoint=ik, occupation=occ_k)
