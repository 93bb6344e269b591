"""cmdwrap - declarative command definitions for wrapping legacy CLI tools."""

__version__ = "0.1.0"

__all__ = ["__version__"]
