"""kubectl plugin for fetching cluster kubeconfigs from a Rancher server."""

from kubectl_rancher.__version__ import __version__

__all__ = ["__version__"]
