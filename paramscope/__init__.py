"""paramscope - static request-parameter analysis for Rails controllers."""

__version__ = "0.1.0"
