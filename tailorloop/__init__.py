"""tailorloop: LaTeX resume tailoring with a multi-stage review loop."""

__version__ = "0.1.0"
