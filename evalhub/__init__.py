"""EvalHub: a filterable catalog of AI evaluation snippets."""

__version__ = "0.1.0"
