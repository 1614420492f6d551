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

"""
Logging system

Messages go to ``rec.stdout`` when ``rec.verbose`` is high enough, on MPI
rank 0 only. ``rec`` is any object carrying ``verbose`` and ``stdout``
attributes (typically a :class:`fermisolve.occ.model.Model`).
"""

import sys
import time
from contextlib import contextmanager

process_clock = time.process_time
perf_counter = time.perf_counter

from fermisolve.__mpi__ import MPI


QUIET  = 0
ERROR  = 1
WARN   = 2
NOTE   = 3
INFO   = 4
DEBUG  = 5
DEBUG1 = DEBUG + 1
DEBUG2 = DEBUG + 2
DEBUG3 = DEBUG + 3
DEBUG4 = DEBUG + 4

rank = MPI.COMM_WORLD.Get_rank()


def _stdout(rec):
    return getattr(rec, "stdout", sys.stdout)


def flush(rec, msg, *args):
    if rank == 0:
        out = _stdout(rec)
        out.write(msg % args)
        out.write('\n')
        out.flush()

def log(rec, msg, *args):
    if rec.verbose > QUIET:
        flush(rec, msg, *args)

def error(rec, msg, *args):
    if rec.verbose >= ERROR:
        flush(rec, '\nERROR: ' + msg + '\n', *args)
    sys.stderr.write('ERROR: ' + (msg % args) + '\n')

def warn(rec, msg, *args):
    if rec.verbose >= WARN:
        flush(rec, '\nWARN: ' + msg + '\n', *args)
        if _stdout(rec) is not sys.stdout:
            sys.stderr.write('WARN: ' + (msg % args) + '\n')

def note(rec, msg, *args):
    if rec.verbose >= NOTE:
        flush(rec, msg, *args)

def info(rec, msg, *args):
    if rec.verbose >= INFO:
        flush(rec, msg, *args)

def debug(rec, msg, *args):
    if rec.verbose >= DEBUG:
        flush(rec, msg, *args)

def debug1(rec, msg, *args):
    if rec.verbose >= DEBUG1:
        flush(rec, msg, *args)

def debug2(rec, msg, *args):
    if rec.verbose >= DEBUG2:
        flush(rec, msg, *args)

def debug3(rec, msg, *args):
    if rec.verbose >= DEBUG3:
        flush(rec, msg, *args)

def debug4(rec, msg, *args):
    if rec.verbose >= DEBUG4:
        flush(rec, msg, *args)


def task_title(msg, level=1):
    if level == 0:
        length = 80
        len1 = (length - len(msg)) // 2
        info = f"\n{'=' * length}"
        info += f"\n{' ' * len1} {msg}\n{'=' * length}"
    elif level == 2:
        length = 60
        len1 = (length - len(msg)) // 2
        len2 = length - len(msg) - len1
        info = f"\n{'*' * len1} {msg} {'*' * len2}"
    else:
        length = 80
        len1 = (length - len(msg)) // 2
        len2 = length - len(msg) - len1
        info = f"\n{'-' * len1} {msg} {'-' * len2}"
    return info


class NullTimer(object):
    r"""Timing observer that records nothing."""

    @contextmanager
    def __call__(self, label):
        yield


class Timer(NullTimer):
    r"""Timing observer accumulating wall and cpu time per label.

    Usage::

        timer = Timer(model)
        with timer("compute_fermi_level"):
            ...
        timer.timings["compute_fermi_level"]  # (cpu, wall, ncalls)
    """

    def __init__(self, rec=None):
        self.rec = rec
        self.timings = {}

    @contextmanager
    def __call__(self, label):
        t0 = (process_clock(), perf_counter())
        try:
            yield
        finally:
            cpu = process_clock() - t0[0]
            wall = perf_counter() - t0[1]
            cpu0, wall0, ncalls = self.timings.get(label, (0.0, 0.0, 0))
            self.timings[label] = (cpu0 + cpu, wall0 + wall, ncalls + 1)
            if self.rec is not None:
                debug(self.rec, '    CPU time for %s %9.2f sec, wall time %9.2f sec',
                      label, cpu, wall)

    def report(self, rec=None):
        rec = rec if rec is not None else self.rec
        for label, (cpu, wall, ncalls) in self.timings.items():
            info(rec, '%-28s ncalls= %4d  cpu= %9.4f  wall= %9.4f', label, ncalls, cpu, wall)
