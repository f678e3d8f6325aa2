"""Progress and scoring engine for BrandPawa diagnostics and challenges."""

__version__ = "0.1.0"
