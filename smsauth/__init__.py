"""Phone number login and registration with single-use SMS verification codes."""

__version__ = "1.0.0"
