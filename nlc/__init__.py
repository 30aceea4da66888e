"""nlc - natural language commands for your terminal."""

__version__ = "0.1.0"
