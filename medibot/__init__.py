"""medibot - first-aid intent matching chatbot."""

__version__ = "0.1.0"
