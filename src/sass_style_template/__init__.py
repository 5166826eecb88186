"""Watch Sass sources and inject compiled CSS into generated style modules."""

__version__ = "0.4.0"
