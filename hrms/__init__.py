"""HR attendance engine: policy-driven attendance classification and overtime."""

__version__ = "1.0.0"
