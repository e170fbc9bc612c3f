"""Heat Diffusion Simulator — Simulation Package.

Material-grid driver for the implicit heat solvers.
"""
