"""HPCTerm — PBS→Slurm conversion and HPL.dat tooling for HPC clusters."""

__version__ = "0.1.0"
