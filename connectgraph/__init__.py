"""ConnectGraph: knowledge connection graph engine."""

__version__ = "0.1.0"
