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
Occupation numbers at a given Fermi level.

.. math::

    f_{nk} = f_\text{filled}\, f\left(\frac{\varepsilon_{nk} - \varepsilon_F}{\theta}\right)

    \Delta N(\varepsilon_F) = \sum_k w_k \sum_n f_{nk} - N_\text{el}

At :math:`\theta = 0` the argument of :math:`f` is :math:`\pm\infty`, which
is built explicitly instead of dividing by zero.
"""

import numpy


def reduced_energies(eps_k, fermi_level, temperature):
    r"""Return :math:`(\varepsilon - \varepsilon_F)/\theta`.

    For ``temperature == 0`` states below (above) the Fermi level map to
    :math:`-\infty` (:math:`+\infty`) and a state exactly at the Fermi level
    maps to 0.
    """
    diff = eps_k - fermi_level
    if temperature == 0:
        return numpy.where(diff > 0, numpy.inf, numpy.where(diff < 0, -numpy.inf, 0.0))
    inverse_temperature = 1.0 / temperature
    return diff * inverse_temperature


def compute_occupation(kset, fermi_level, temperature, smearing, filled_occ):
    r"""Occupations of every local k-point at ``fermi_level``.

    Returns a list of new arrays aligned with ``kset.eigenvalues``. No
    reduction is involved.
    """
    occupation = []
    for eps_k in kset.eigenvalues:
        x = reduced_energies(eps_k, fermi_level, temperature)
        occupation.append(filled_occ * numpy.asarray(smearing.occupation(x), dtype=float))
    return occupation


def excess_n_electrons(kset, model, fermi_level, temperature=None, smearing=None):
    r"""Electron count at ``fermi_level`` minus ``model.n_electrons``.

    Collective: every worker must call it with the same ``fermi_level``.
    ``temperature`` and ``smearing`` default to the model's.
    """
    if temperature is None:
        temperature = model.temperature
    if smearing is None:
        smearing = model.smearing
    occupation = compute_occupation(kset, fermi_level, temperature, smearing,
                                    model.filled_occupation)
    n_electrons = kset.weighted_ksum([occ_k.sum() for occ_k in occupation])
    return n_electrons - model.n_electrons


def excess_n_electrons_derivative(kset, model, fermi_level, temperature=None, smearing=None):
    r"""Derivative :math:`d\Delta N/d\varepsilon_F`, i.e. the density of states
    at the Fermi level as seen through the smearing function.

    Zero at zero temperature. Collective, like :func:`excess_n_electrons`.
    """
    if temperature is None:
        temperature = model.temperature
    if smearing is None:
        smearing = model.smearing
    if temperature == 0:
        return 0.0

    inverse_temperature = 1.0 / temperature
    ddos = []
    for eps_k in kset.eigenvalues:
        x = reduced_energies(eps_k, fermi_level, temperature)
        docc = numpy.asarray(smearing.occupation_derivative(x), dtype=float)
        ddos.append(-inverse_temperature * model.filled_occupation * docc.sum())
    return kset.weighted_ksum(ddos)
