import threading
import unittest

import numpy

from fermisolve.__mpi__ import FakeComm, FakeMPI, LocalReducer, MPIReducer, default_reducer, load_mpi
from fermisolve.smearing import FermiDirac, MarzariVanderbilt
from fermisolve.occ import (
    FractionalOccupationError,
    InsufficientBandsError,
    KpointEigenvalues,
    solve,
)

from systems import chain_kset, quiet_model, thread_reducers

NKPTS = 8


def run_workers(n_workers, make_kset, make_model):
    r"""Run :func:`solve` on ``n_workers`` threads in lock-step."""
    reducers = thread_reducers(n_workers)
    results = [None] * n_workers
    errors = [None] * n_workers

    def work(rank):
        try:
            results[rank] = solve(make_kset(rank, reducers[rank]), make_model())
        except Exception as exc:
            errors[rank] = exc

    threads = [threading.Thread(target=work, args=(rank,)) for rank in range(n_workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results, errors, reducers


def chain_share(n_workers):
    def make_kset(rank, reducer):
        return chain_kset(nkpts=NKPTS, reducer=reducer, kpoints=range(rank, NKPTS, n_workers))
    return make_kset


class TestReducers(unittest.TestCase):

    def test_local_reducer(self):
        reducer = LocalReducer()
        self.assertEqual(reducer.sum(1.5), 1.5)
        self.assertEqual(reducer.min(numpy.inf), numpy.inf)
        self.assertEqual(reducer.max(-2), -2.0)

    def test_mpi_reducer_on_fake_comm(self):
        reducer = MPIReducer(FakeComm())
        self.assertEqual(reducer.size, 1)
        self.assertEqual(reducer.rank, 0)
        self.assertEqual(reducer.sum(3.0), 3.0)
        self.assertEqual(reducer.min(1.0), 1.0)
        self.assertEqual(reducer.max(1.0), 1.0)

    def test_load_mpi(self):
        MPI = load_mpi()
        comm = MPI.COMM_WORLD
        self.assertGreaterEqual(comm.Get_size(), 1)
        self.assertEqual(MPIReducer(comm).size, comm.Get_size())

    def test_fake_mpi_world(self):
        reducer = MPIReducer(FakeMPI.COMM_WORLD)
        self.assertEqual(reducer.sum(numpy.float64(2.5)), 2.5)
        self.assertIsInstance(reducer.max(1), float)

    def test_default_reducer_single_process(self):
        self.assertIsInstance(default_reducer(), LocalReducer)

    def test_thread_reducers(self):
        reducers = thread_reducers(3)
        out = [None] * 3

        def work(rank):
            r = reducers[rank]
            out[rank] = (r.sum(rank + 1), r.min(rank), r.max(rank))

        threads = [threading.Thread(target=work, args=(rank,)) for rank in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(out, [(6.0, 0.0, 2.0)] * 3)


class TestMultiWorkerSolve(unittest.TestCase):

    def test_matches_single_worker(self):
        for smear in (FermiDirac(), MarzariVanderbilt()):
            with self.subTest(smearing=smear):
                def make_model():
                    return quiet_model(5, temperature=0.05, smearing=smear)
                serial = solve(chain_kset(nkpts=NKPTS), make_model())
                for n_workers in (2, 3):
                    results, errors, reducers = run_workers(n_workers, chain_share(n_workers),
                                                            make_model)
                    self.assertEqual(errors, [None] * n_workers)
                    fermi_levels = [res.fermi_level for res in results]
                    # identical sequence of reductions on every worker
                    self.assertTrue(all(r.calls == reducers[0].calls for r in reducers))
                    self.assertEqual(len(set(fermi_levels)), 1)
                    self.assertAlmostEqual(fermi_levels[0], serial.fermi_level, places=10)

    def test_occupations_partitioned(self):
        def make_model():
            return quiet_model(5, temperature=0.05, smearing=FermiDirac())
        results, errors, _ = run_workers(2, chain_share(2), make_model)
        self.assertEqual(errors, [None, None])
        total = 0.0
        for rank, res in enumerate(results):
            self.assertEqual(len(res.occupation), len(range(rank, NKPTS, 2)))
            total += sum(occ_k.sum() for occ_k in res.occupation) / NKPTS
        self.assertAlmostEqual(total, 5.0, places=6)

    def test_worker_without_kpoints(self):
        def make_kset(rank, reducer):
            kpoints = range(NKPTS) if rank == 0 else []
            return chain_kset(nkpts=NKPTS, reducer=reducer, kpoints=kpoints)

        def make_model():
            return quiet_model(5, temperature=0.05, smearing=FermiDirac())
        results, errors, _ = run_workers(2, make_kset, make_model)
        self.assertEqual(errors, [None, None])
        self.assertEqual(results[1].occupation, [])
        self.assertEqual(results[0].fermi_level, results[1].fermi_level)

    def test_errors_raised_on_every_worker(self):
        def make_model():
            return quiet_model(3)
        _, errors, _ = run_workers(2, chain_share(2), make_model)
        self.assertTrue(all(isinstance(err, FractionalOccupationError) for err in errors))

    def test_short_kpoint_on_one_worker(self):
        def make_kset(rank, reducer):
            eigenvalues = [[-1.0]] if rank == 0 else [[-1.0, 0.0, 1.0]]
            return KpointEigenvalues(eigenvalues, [0.5], reducer=reducer)

        def make_model():
            return quiet_model(4, temperature=0.1, smearing=FermiDirac())
        _, errors, _ = run_workers(2, make_kset, make_model)
        self.assertTrue(all(isinstance(err, InsufficientBandsError) for err in errors))
