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
Smearing (occupation) functions
===============================

A smearing function maps the reduced energy :math:`x = (\varepsilon -
\varepsilon_F)/\theta` to an occupation :math:`f(x)` with :math:`f(-\infty) = 1`
and :math:`f(+\infty) = 0`. Only the monotonic ones (:class:`NoSmearing`,
:class:`FermiDirac`, :class:`Gaussian`) guarantee a unique Fermi level.

.. math::

    \text{Fermi-Dirac:}\quad & f(x) = \frac{1}{1 + e^{x}} \\
    \text{Gaussian:}\quad & f(x) = \frac{1}{2}\mathrm{erfc}(x) \\
    \text{Methfessel-Paxton:}\quad & f_N(x) = \frac{1}{2}\mathrm{erfc}(x)
        + \sum_{n=1}^N A_n H_{2n-1}(x) e^{-x^2},
        \quad A_n = \frac{(-1)^n}{n!\,4^n\sqrt{\pi}} \\
    \text{Marzari-Vanderbilt:}\quad & f(x) = \frac{1}{2}\mathrm{erfc}(y)
        + \frac{e^{-y^2}}{\sqrt{2\pi}}, \quad y = x + \frac{1}{\sqrt{2}}

Ref:
    M. Methfessel and A. T. Paxton, Phys. Rev. B 40, 3616 (1989).
    N. Marzari, D. Vanderbilt, A. De Vita and M. C. Payne,
    Phys. Rev. Lett. 82, 3296 (1999).
"""

import math

import numpy
from scipy.special import erfc, eval_hermite, expit


class SmearingFunction(object):
    r"""Base class of the smearing functions.

    Subclasses implement ``_occupation`` and ``_occupation_derivative`` for
    finite arguments; the limits at :math:`\pm\infty` are handled here.
    """

    monotonic = True

    def occupation(self, x):
        r"""Occupation :math:`f(x) \in [0, 1]` (elementwise)."""
        x = numpy.asarray(x, dtype=float)
        finite = numpy.isfinite(x)
        occ = numpy.where(x < 0, 1.0, 0.0)
        if numpy.any(finite):
            occ = numpy.where(finite, self._occupation(numpy.where(finite, x, 0.0)), occ)
        return occ[()] if occ.ndim == 0 else occ

    def occupation_derivative(self, x):
        r"""Derivative :math:`f'(x)`, zero at :math:`\pm\infty`."""
        x = numpy.asarray(x, dtype=float)
        finite = numpy.isfinite(x)
        docc = numpy.zeros_like(x)
        if numpy.any(finite):
            docc = numpy.where(finite,
                               self._occupation_derivative(numpy.where(finite, x, 0.0)),
                               docc)
        return docc[()] if docc.ndim == 0 else docc

    def _occupation(self, x):
        raise NotImplementedError("Method Not Implemented")

    def _occupation_derivative(self, x):
        raise NotImplementedError("Method Not Implemented")

    def __repr__(self):
        return f"{self.__class__.__name__}()"

    def __eq__(self, other):
        return type(self) is type(other) and self.__dict__ == other.__dict__

    def __hash__(self):
        return hash((type(self), tuple(sorted(self.__dict__.items()))))


class NoSmearing(SmearingFunction):
    r"""Step function, :math:`f(x) = 1` for :math:`x \le 0`."""

    def _occupation(self, x):
        return numpy.where(x > 0, 0.0, 1.0)

    def _occupation_derivative(self, x):
        return numpy.zeros_like(x)


class FermiDirac(SmearingFunction):

    def _occupation(self, x):
        # expit is overflow-safe for large |x|
        return expit(-x)

    def _occupation_derivative(self, x):
        return -expit(x) * expit(-x)


class Gaussian(SmearingFunction):

    def _occupation(self, x):
        return 0.5 * erfc(x)

    def _occupation_derivative(self, x):
        return -numpy.exp(-x * x) / math.sqrt(math.pi)


class MethfesselPaxton(SmearingFunction):
    r"""Methfessel-Paxton smearing of a given ``order`` (``order=0`` is Gaussian).

    For ``order >= 1`` the occupation is not monotonic and overshoots
    :math:`[0, 1]` slightly around :math:`|x| \sim 1`.
    """

    def __init__(self, order=1):
        if order < 0:
            raise ValueError(f"Methfessel-Paxton order must be >= 0, got {order}")
        self.order = int(order)
        self.monotonic = self.order == 0

    def _coeff(self, n):
        return (-1) ** n / (math.factorial(n) * 4**n * math.sqrt(math.pi))

    def _occupation(self, x):
        occ = 0.5 * erfc(x)
        gauss = numpy.exp(-x * x)
        for n in range(1, self.order + 1):
            occ = occ + self._coeff(n) * eval_hermite(2 * n - 1, x) * gauss
        return occ

    def _occupation_derivative(self, x):
        gauss = numpy.exp(-x * x)
        delta = numpy.zeros_like(x)
        for n in range(0, self.order + 1):
            delta = delta + self._coeff(n) * eval_hermite(2 * n, x) * gauss
        return -delta

    def __repr__(self):
        return f"MethfesselPaxton(order={self.order})"


class MarzariVanderbilt(SmearingFunction):
    r"""Marzari-Vanderbilt (cold) smearing."""

    monotonic = False

    def _occupation(self, x):
        y = x + 1.0 / math.sqrt(2.0)
        return 0.5 * erfc(y) + numpy.exp(-y * y) / math.sqrt(2.0 * math.pi)

    def _occupation_derivative(self, x):
        y = x + 1.0 / math.sqrt(2.0)
        return -numpy.exp(-y * y) * (2.0 + math.sqrt(2.0) * x) / math.sqrt(math.pi)


_SMEARINGS = {
    "none": NoSmearing,
    "fermi-dirac": FermiDirac,
    "fd": FermiDirac,
    "gaussian": Gaussian,
    "methfessel-paxton": MethfesselPaxton,
    "mp": MethfesselPaxton,
    "marzari-vanderbilt": MarzariVanderbilt,
    "cold": MarzariVanderbilt,
    "mv": MarzariVanderbilt,
}


def smearing_from_name(name, **kwargs):
    r"""Build a smearing function from its name, e.g. ``"fermi-dirac"`` or ``"cold"``.

    Extra keyword arguments are passed to the constructor
    (``smearing_from_name("mp", order=2)``).
    """
    key = str(name).strip().lower().replace("_", "-")
    if key not in _SMEARINGS:
        raise ValueError(f"Unknown smearing {name!r}. Available: {sorted(_SMEARINGS)}")
    return _SMEARINGS[key](**kwargs)
