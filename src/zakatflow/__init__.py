"""ZakatFlow: methodology-aware zakat calculation and flow allocation."""

__version__ = "0.1.0"
