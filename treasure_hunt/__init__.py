"""Grid treasure hunt: connectivity-preserving map generation, BFS/A* hints and gameplay rules."""

__version__ = "0.1.0"
