"""Heat Diffusion Simulator — Model Package.

Material descriptors, configuration dataclasses and the YAML loader.
"""
