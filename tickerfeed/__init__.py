"""Live exchange ticker streaming with EMA calculation and CSV recording."""

__version__ = "0.1.0"
__all__ = ["__version__"]