"""Academy payroll computation and confirmation engine."""

__version__ = "1.0.0"
