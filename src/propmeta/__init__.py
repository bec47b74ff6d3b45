"""propmeta - configuration metadata index for .properties editing."""

__version__ = "0.1.0"
