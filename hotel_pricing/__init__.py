"""Hotel pricing and availability engine."""

__version__ = "1.0.0"
