"""preptimer: preparation-timer engine for food-order storefronts."""

__version__ = "0.1.0"
