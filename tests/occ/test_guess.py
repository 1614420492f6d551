import io
import unittest

from fermisolve.lib import logger
from fermisolve.occ import InsufficientBandsError, KpointEigenvalues, Model, guess_fermi_level_intocc
from fermisolve.occ.guess import homo_lumo, n_filled_bands

from systems import quiet_model, two_kpoint_kset


class TestGuessFermiLevel(unittest.TestCase):

    def test_scenario_a(self):
        kset = two_kpoint_kset()
        model = quiet_model(2)
        self.assertEqual(n_filled_bands(model), 1)
        self.assertEqual(homo_lumo(kset, model), (-1.0, 0.5))
        self.assertEqual(guess_fermi_level_intocc(kset, model), -0.25)

    def test_n_fill_rounds_up(self):
        self.assertEqual(n_filled_bands(quiet_model(3)), 2)
        self.assertEqual(n_filled_bands(quiet_model(3, n_spin_components=2)), 2)
        self.assertEqual(n_filled_bands(quiet_model(2.5, filled_occupation=1)), 3)

    def test_homo_is_max_lumo_is_min_over_kpoints(self):
        kset = KpointEigenvalues([[-2.0, -0.4, 1.0], [-1.5, -0.2, 0.6]], [0.5, 0.5])
        model = quiet_model(4)
        self.assertEqual(homo_lumo(kset, model), (-0.2, 0.6))
        self.assertAlmostEqual(guess_fermi_level_intocc(kset, model), 0.2)

    def test_no_lumo_anywhere(self):
        kset = KpointEigenvalues([[-1.0, 0.5], [-1.2, 0.3]], [0.5, 0.5])
        model = quiet_model(4)
        self.assertEqual(guess_fermi_level_intocc(kset, model), 0.5 + 1)

    def test_kpoints_without_lumo_are_excluded(self):
        kset = KpointEigenvalues([[-1.0, 0.5], [-1.2, 0.3, 0.9]], [0.5, 0.5])
        model = quiet_model(4)
        homo, lumo = homo_lumo(kset, model)
        self.assertEqual(homo, 0.5)
        self.assertEqual(lumo, 0.9)
        self.assertAlmostEqual(guess_fermi_level_intocc(kset, model), 0.7)

    def test_no_electrons(self):
        kset = two_kpoint_kset()
        model = quiet_model(0)
        self.assertEqual(guess_fermi_level_intocc(kset, model), -2.0)

    def test_too_few_bands_at_one_kpoint(self):
        kset = KpointEigenvalues([[-1.0], [-1.0, 0.0, 1.0]], [0.5, 0.5])
        model = quiet_model(4)
        with self.assertRaises(InsufficientBandsError):
            guess_fermi_level_intocc(kset, model)

    def test_debug_log_reports_gap(self):
        kset = KpointEigenvalues([[-1.0, 0.0, 1e-4]], [1.0])
        stdout = io.StringIO()
        model = Model(4, verbose=logger.DEBUG, stdout=stdout)
        self.assertEqual(guess_fermi_level_intocc(kset, model), 5e-5)
        self.assertIn("gap = 0.0001", stdout.getvalue())
        self.assertNotIn("==", stdout.getvalue())
