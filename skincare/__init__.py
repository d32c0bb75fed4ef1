"""Personal skincare and makeup inventory tracker."""

__version__ = "0.2.0"
