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

import os
from pyscf import __config__

#
# All parameters initialized before loading fermisolve_conf.py will be
# overwritten by the dynamic importing procedure.
#

DEBUG = getattr(__config__, "DEBUG", False)

VERBOSE = getattr(__config__, "VERBOSE", 3) # default logger level (logger.NOTE)

#
# Fermi level solver parameters. Each can be set in the PySCF config, through
# an environment variable, or in .fermisolve_conf.py
#

FS_TOL_N_ELEC = float(os.environ.get("FS_TOL_N_ELEC", 1e-6))
FERMI_TOL_N_ELEC = getattr(__config__, "fermi_tol_n_elec", FS_TOL_N_ELEC)

# the integer-occupation guess is accepted when |excess| < tol_n_elec * factor
FS_CHEAP_PATH_FACTOR = float(os.environ.get("FS_CHEAP_PATH_FACTOR", 0.1))
CHEAP_PATH_FACTOR = getattr(__config__, "fermi_cheap_path_factor", FS_CHEAP_PATH_FACTOR)

BISECT_MAXITER = int(os.environ.get("FS_BISECT_MAXITER", 500))
SECANT_MAXITER = int(os.environ.get("FS_SECANT_MAXITER", 100))

FULL_OCC_ATOL = getattr(__config__, "fermi_full_occ_atol", 1e-12)

#
# Loading fermisolve_conf.py and overwriting above parameters
#

for conf_file in (os.environ.get("FERMISOLVE_CONFIG_FILE", None),
                  os.path.join(os.path.abspath("."), ".fermisolve_conf.py"),
                  os.path.join(os.environ.get("HOME", "."), ".fermisolve_conf.py")):
    if conf_file is not None and os.path.isfile(conf_file):
        break
else:
    conf_file = None

if conf_file is not None:
    with open(conf_file, "r") as f:
        exec(f.read())
    del f
del os

#
# All parameters initialized after loading fermisolve_conf.py will be kept in
# the program.
#
