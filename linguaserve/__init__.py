"""linguaserve: language-pair model routing over a shared translation engine."""

__version__ = "0.1.0"
