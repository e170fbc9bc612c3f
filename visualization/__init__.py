"""Heat Diffusion Simulator — Visualization Package."""
