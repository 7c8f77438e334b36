"""
TXR Compiler Configuration
==========================

Options controlling a compile-and-run call. Configuration can come from:
- Default values (defined here)
- Environment variables (``CompilerOptions.from_env``)
- Explicit keyword arguments

Environment variables (all optional):
    TXR_VERBOSE: Hand intermediate stages to the listener (1/true/yes/on)
    TXR_SHOW_SOURCE: Attach the source line to error messages (default on)
"""

import os
from dataclasses import dataclass
from typing import Any, Callable, Optional

# Stage names passed to listeners
STAGE_TOKENS = "tokens"
STAGE_AST = "ast"
STAGE_BYTECODE = "bytecode"

StageListener = Callable[[str, Any], None]

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        verbose: Hand the token list, AST and bytecode to ``listener``
                 after each stage. The payloads are passed unmodified.
        listener: Callable receiving ``(stage, payload)``. When None and
                  verbose is set, stages are formatted with txr.printer
                  and logged at INFO level on the ``txr`` logger.
        show_source: Attach the source text to errors raised without it, so they
                     render with a caret under the failing position.
    """
    verbose: bool = False
    listener: Optional[StageListener] = None
    show_source: bool = True

    @classmethod
    def from_env(cls, **overrides: Any) -> "CompilerOptions":
        """
        Create options from environment variables.

        Args:
            overrides: Field values taking priority over the environment

        Returns:
            CompilerOptions with values from the environment
        """
        options = cls(
            verbose=_env_flag("TXR_VERBOSE", False),
            show_source=_env_flag("TXR_SHOW_SOURCE", True),
        )
        for name, value in overrides.items():
            if not hasattr(options, name):
                raise TypeError(f"unknown compiler option '{name}'")
            setattr(options, name, value)
        return options
