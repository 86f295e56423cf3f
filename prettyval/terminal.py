"""
Terminal capability detection used by ColorMode.AUTO.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import sys

# Third-party ----------------------------------------------------------------------------------------------------------
from rich.console import Console


# Methods --------------------------------------------------------------------------------------------------------------

def stdout_is_terminal() -> bool:
    """
    Check whether the current sys.stdout is an interactive terminal.

    Honors rich's FORCE_COLOR / TTY_COMPATIBLE environment overrides.
    """
    return Console(file=sys.stdout).is_terminal
