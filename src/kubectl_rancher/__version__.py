"""Version information for kubectl_rancher."""

__version__ = "0.3.0"
