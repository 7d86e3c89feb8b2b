"""Builders of labels, volumes, volume claims and containers for replicated MySQL clusters."""

__version__ = "0.1.0"
__all__ = ["constants", "quantity", "kube", "spec", "cluster", "containers"]