"""RadioCore: audio engine program synthesis and runtime control for radio stations."""

__version__ = "0.1.0"
