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
Collective reductions over the k-point workers.

The Fermi level solver only needs three collectives: ``sum``, ``min`` and
``max`` of a scalar. They are injected into the solver as a :class:`Reducer`
so that serial and MPI runs go through identical solver code. Every worker
must call the same reductions in the same order.
"""

import copy
from dataclasses import dataclass


class FakeComm:
    """Fake MPI communicator class to reduce logic."""

    def __init__(self):
        self.rank = 0
        self.size = 1

    def Get_size(self):
        return 1

    def Get_rank(self):
        return 0

    def allreduce(self, sendbuf, op=None):
        return copy.deepcopy(sendbuf)


@dataclass
class FakeMPI:
    COMM_WORLD = FakeComm()
    SUM = None
    MIN = None
    MAX = None


def load_mpi():
    try:
        from mpi4py import MPI

        return MPI
    except (ModuleNotFoundError, ImportError):
        return FakeMPI


MPI = load_mpi()


class Reducer(object):
    r"""Synchronous scalar reductions across the k-point workers.

    Implementations must be associative and commutative, and must return the
    same value on every worker.
    """

    size = 1
    rank = 0

    def sum(self, value):
        raise NotImplementedError("Method Not Implemented")

    def min(self, value):
        raise NotImplementedError("Method Not Implemented")

    def max(self, value):
        raise NotImplementedError("Method Not Implemented")

    def __repr__(self):
        return f"{self.__class__.__name__}(size={self.size}, rank={self.rank})"


class LocalReducer(Reducer):
    r"""Single worker: every reduction is the identity."""

    def sum(self, value):
        return float(value)

    def min(self, value):
        return float(value)

    def max(self, value):
        return float(value)


class MPIReducer(Reducer):
    r"""Reductions over an MPI communicator (``MPI.COMM_WORLD`` by default).

    Falls back to :class:`FakeComm` semantics when mpi4py is not installed.
    """

    def __init__(self, comm=None):
        if comm is None:
            comm = MPI.COMM_WORLD
        self.comm = comm
        self.size = comm.Get_size()
        self.rank = comm.Get_rank()

    def sum(self, value):
        return float(self.comm.allreduce(float(value), op=MPI.SUM))

    def min(self, value):
        return float(self.comm.allreduce(float(value), op=MPI.MIN))

    def max(self, value):
        return float(self.comm.allreduce(float(value), op=MPI.MAX))


def default_reducer():
    r"""MPI reducer when running under more than one rank, local otherwise."""
    if MPI.COMM_WORLD.Get_size() > 1:
        return MPIReducer()
    return LocalReducer()
