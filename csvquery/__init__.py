"""Read and preview a CSV dataset as delimiter-normalized text."""

__version__ = "0.1.0"
