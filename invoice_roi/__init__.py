"""Invoice automation ROI estimator: metrics engine, scenario store and reports."""

__version__ = "1.0.0"
