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
Integer-occupation estimate of the Fermi level.

Assumes (a) integer occupations and (b) the same number of filled bands
:math:`n_\text{fill} = \lceil N_\text{el} / (n_\text{spin} f_\text{filled}) \rceil`
at every k-point. The HOMO is the highest :math:`n_\text{fill}`-th band over
all k-points, the LUMO the lowest :math:`(n_\text{fill}+1)`-th band, and the
guess sits in the middle. This is exact for a zero-temperature insulator and
only a starting point otherwise.
"""

import math

import numpy

from fermisolve.lib import logger
from fermisolve.occ.errors import InsufficientBandsError


def n_filled_bands(model):
    r"""Number of bands filled per k-point under uniform integer filling."""
    return int(math.ceil(model.n_electrons / (model.n_spin_components * model.filled_occupation)))


def homo_lumo(kset, model):
    r"""Globally reduced ``(HOMO, LUMO)`` under uniform integer filling.

    ``HOMO`` is ``-inf`` when no band is filled and ``LUMO`` is ``+inf`` when
    no k-point has an empty band. Collective.
    """
    n_fill = n_filled_bands(model)

    # every worker must reach the same verdict before raising
    too_few = any(eps_k.size < n_fill for eps_k in kset.eigenvalues)
    if kset.reducer.max(1.0 if too_few else 0.0) > 0:
        raise InsufficientBandsError(
            f"Uniform filling needs {n_fill} bands at every k-point, but some "
            "k-points have fewer. Increase the number of bands.")

    if n_fill > 0:
        homo = max((eps_k[n_fill - 1] for eps_k in kset.eigenvalues), default=-numpy.inf)
    else:
        homo = -numpy.inf
    homo = kset.reducer.max(homo)

    # k-points without an (n_fill+1)-th band never win the minimum
    lumo = min((eps_k[n_fill] for eps_k in kset.eigenvalues if eps_k.size > n_fill),
               default=numpy.inf)
    lumo = kset.reducer.min(lumo)
    return homo, lumo


def guess_fermi_level_intocc(kset, model):
    r"""Midpoint between HOMO and LUMO; ``HOMO + 1`` without any LUMO.

    Collective.
    """
    homo, lumo = homo_lumo(kset, model)

    if numpy.isinf(lumo) and numpy.isinf(homo):
        raise InsufficientBandsError("No eigenvalues to place a Fermi level in.")
    if numpy.isinf(lumo):
        # no upper bound available, just stay above the HOMO
        fermi_level = homo + 1
    elif numpy.isinf(homo):
        fermi_level = lumo - 1
    else:
        fermi_level = (homo + lumo) / 2

    logger.debug(model, '  HOMO = %.15g  LUMO = %.15g  gap = %.6g  guess eF = %.15g',
                 homo, lumo, lumo - homo, fermi_level)
    return fermi_level
