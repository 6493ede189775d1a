"""
Station-level operations.

CLI commands call functions from here rather than driving the program
assembler or control client directly.
"""

from . import station_config_write  # noqa: I001
from . import streamers  # noqa: I001
from . import engine_control  # noqa: I001
