"""Convert Medium export posts into Jekyll Markdown."""

__version__ = "0.1.0"
