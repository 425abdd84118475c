"""I/O utilities for loading robot models and filter parameters.

This module parses URDF robot descriptions into JAX-native data structures
and reads filter parameter trees from YAML.
"""

from .urdf_parser import load_urdf, parse_urdf
from .params import load_params

__all__ = ["load_urdf", "parse_urdf", "load_params"]
