"""
TXR Command-Line Interface
==========================

This package provides the command-line tools for TXR:

- **txrc**: compile and run an expression, or dump any pipeline stage

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["txrc"]
