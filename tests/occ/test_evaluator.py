import unittest

import numpy

from fermisolve.smearing import FermiDirac, Gaussian, MarzariVanderbilt, NoSmearing
from fermisolve.occ import (
    compute_occupation,
    excess_n_electrons,
    excess_n_electrons_derivative,
)
from fermisolve.occ.evaluator import reduced_energies

from systems import chain_kset, quiet_model, two_kpoint_kset


class TestReducedEnergies(unittest.TestCase):

    def test_zero_temperature_is_explicit_step(self):
        eps = numpy.array([-1.0, 0.0, 1.0])
        with numpy.errstate(all="raise"):
            x = reduced_energies(eps, 0.0, 0.0)
        numpy.testing.assert_array_equal(x, [-numpy.inf, 0.0, numpy.inf])

    def test_finite_temperature(self):
        eps = numpy.array([-1.0, 0.0, 1.0])
        numpy.testing.assert_allclose(reduced_energies(eps, 0.5, 0.5), [-3.0, -1.0, 1.0])


class TestComputeOccupation(unittest.TestCase):

    def test_zero_temperature_occupations(self):
        kset = two_kpoint_kset()
        with numpy.errstate(all="raise"):
            occupation = compute_occupation(kset, -0.25, 0.0, Gaussian(), 2)
        for occ_k in occupation:
            numpy.testing.assert_array_equal(occ_k, [2.0, 0.0, 0.0])

    def test_occupations_within_bounds(self):
        kset = chain_kset()
        for smear in (FermiDirac(), Gaussian(), NoSmearing()):
            occupation = compute_occupation(kset, 0.3, 0.2, smear, 2)
            for occ_k in occupation:
                self.assertTrue(numpy.all((occ_k >= 0) & (occ_k <= 2)))

    def test_aligned_with_eigenvalues(self):
        kset = chain_kset(nkpts=3, nbands=4)
        occupation = compute_occupation(kset, 0.0, 0.1, FermiDirac(), 1)
        self.assertEqual(len(occupation), kset.nkpts)
        for occ_k, eps_k in zip(occupation, kset.eigenvalues):
            self.assertEqual(occ_k.shape, eps_k.shape)

    def test_does_not_touch_inputs(self):
        kset = two_kpoint_kset()
        occupation = compute_occupation(kset, 0.0, 0.1, FermiDirac(), 2)
        occupation[0][:] = -1
        numpy.testing.assert_array_equal(kset.eigenvalues[0], [-1.0, 0.5, 2.0])
        self.assertFalse(kset.eigenvalues[0].flags.writeable)

    def test_pure_function(self):
        kset = chain_kset()
        occ1 = compute_occupation(kset, 0.123, 0.05, MarzariVanderbilt(), 2)
        occ2 = compute_occupation(kset, 0.123, 0.05, MarzariVanderbilt(), 2)
        for a, b in zip(occ1, occ2):
            numpy.testing.assert_array_equal(a, b)


class TestExcess(unittest.TestCase):

    def test_scenario_a_excess_is_zero(self):
        kset = two_kpoint_kset()
        model = quiet_model(2)
        self.assertEqual(excess_n_electrons(kset, model, -0.25), 0.0)

    def test_excess_limits(self):
        kset = two_kpoint_kset()
        model = quiet_model(2, temperature=0.1, smearing=FermiDirac())
        # all empty / all filled
        self.assertAlmostEqual(excess_n_electrons(kset, model, -100.0), -2.0)
        self.assertAlmostEqual(excess_n_electrons(kset, model, 100.0), 4.0)

    def test_excess_is_non_decreasing_for_monotonic_smearing(self):
        kset = chain_kset()
        fermi_levels = numpy.linspace(-3, 3, 301)
        for smear in (FermiDirac(), Gaussian()):
            for temperature in (0.01, 0.1, 1.0):
                model = quiet_model(6, temperature=temperature, smearing=smear)
                values = [excess_n_electrons(kset, model, ef) for ef in fermi_levels]
                self.assertTrue(numpy.all(numpy.diff(values) >= -1e-12),
                                msg=f"{smear} at T={temperature}")

    def test_overrides_take_precedence(self):
        kset = chain_kset()
        model = quiet_model(6, temperature=0.1, smearing=FermiDirac())
        ref = excess_n_electrons(kset, quiet_model(6, temperature=0.2, smearing=Gaussian()), 0.1)
        self.assertEqual(excess_n_electrons(kset, model, 0.1, 0.2, Gaussian()), ref)

    def test_derivative_matches_finite_difference(self):
        kset = chain_kset()
        h = 1e-6
        for smear in (FermiDirac(), Gaussian(), MarzariVanderbilt()):
            model = quiet_model(6, temperature=0.1, smearing=smear)
            for ef in (-0.7, 0.0, 0.4):
                fd = (excess_n_electrons(kset, model, ef + h)
                      - excess_n_electrons(kset, model, ef - h)) / (2 * h)
                self.assertAlmostEqual(excess_n_electrons_derivative(kset, model, ef), fd,
                                       places=5)

    def test_derivative_zero_temperature(self):
        kset = two_kpoint_kset()
        model = quiet_model(2)
        self.assertEqual(excess_n_electrons_derivative(kset, model, -0.25), 0.0)
