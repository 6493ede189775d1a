"""
Engine program synthesis.

``ConfigurationAssembler`` runs the section writers in priority order over a
``ProgramBuffer`` and persists the rendered program.
"""

from .assembler import ConfigurationAssembler

__all__ = ["ConfigurationAssembler"]
