"""Formula Terrain: infinite voxel terrain from height formulas."""

__version__ = "0.1.0"
