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


from setuptools import setup, find_packages

# required list:
# Function to read the requirements.txt file
def parse_requirements(filename):
    with open(filename, 'r') as f:
        lines = (line.strip() for line in f)
        return [line for line in lines if line and not line.startswith("#")]

# Parse the requirements from the requirements.txt file
install_requires = parse_requirements("requirements.txt")

setup(
    name="fermisolve",
    version="0.1.0",
    description="Fermi level and occupation numbers for k-point resolved band energies.",
    packages=find_packages(include=["fermisolve", "fermisolve.*"]),
    install_requires=install_requires,
    python_requires=">=3.8",
    extras_require={ # optional package for extra features
        "mpi": ["mpi4py"],
        "test": ["pytest"], # for test
        "all": ["mpi4py"]
    },
)
