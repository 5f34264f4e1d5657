"""predfinder - Polymarket market resolution, trending selection and price history."""

__version__ = "0.1.0"
