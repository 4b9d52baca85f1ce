"""Energy price aggregation with fallback estimates and elasticity projections."""

__version__ = "1.0.0"
