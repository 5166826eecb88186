"""Text-in, text-out stylesheet transforms."""

from .compiler import SassCompiler, StyleCompiler
from .prefixer import CssPostProcessor, VendorPrefixer

__all__ = ["CssPostProcessor", "SassCompiler", "StyleCompiler", "VendorPrefixer"]
