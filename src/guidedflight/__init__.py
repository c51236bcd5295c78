"""guidedflight - 6-DOF flight dynamics for guided projectiles."""

__version__ = "1.0.0"
