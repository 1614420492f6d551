import numpy

from fermisolve import occ
from fermisolve.__mpi__ import default_reducer
from fermisolve.lib.logger import Timer

# Bands of a 1D chain with 6 orbitals per cell on an 8-point k-mesh.
# Under mpirun, every rank keeps a round-robin share of the k-points.
reducer = default_reducer()
nkpts, nbands = 8, 6
ks = numpy.arange(nkpts) * 2 * numpy.pi / nkpts
eigenvalues = []
for ik in range(reducer.rank, nkpts, reducer.size):
    eps = -2.0 * numpy.cos((ks[ik] + 2 * numpy.pi * numpy.arange(nbands)) / nbands)
    eigenvalues.append(numpy.sort(eps))
weights = numpy.full(len(eigenvalues), 1.0 / nkpts)

kset = occ.KpointEigenvalues(eigenvalues, weights, reducer=reducer)

# Fermi-Dirac smearing: bisection
model = occ.Model(n_electrons=5, temperature=0.05, smearing="fermi-dirac", verbose=4)
timer = Timer(model)
result = occ.solve(kset, model, tol_n_elec=1e-10, timer=timer)
print("Fermi-Dirac eF =", result.fermi_level, "with", result.fermialg)

# Cold smearing: two-stage solve from a Gaussian guess
model = occ.Model(n_electrons=5, temperature=0.05, smearing="cold", verbose=4)
result = occ.solve(kset, model, tol_n_elec=1e-10, timer=timer)
print("Marzari-Vanderbilt eF =", result.fermi_level, "with", result.fermialg)

# Zero temperature only works for gapped systems: the folded chain has
# degenerate levels at the Fermi level, so use a two k-point insulator.
# Every rank holds both k-points here, hence a local reducer.
insulator = occ.KpointEigenvalues([[-1.0, 0.5, 2.0], [-0.9, 0.3, 2.0]], [0.5, 0.5])
model = occ.Model(n_electrons=2, temperature=0.0, verbose=4)
occupation, fermi_level = occ.solve(insulator, model)
occ.validate_fully_filled([occ_k[:1] for occ_k in occupation], model.filled_occupation)
print("T = 0 eF =", fermi_level)

timer.report()
