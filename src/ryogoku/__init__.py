"""Ryogoku: a Kubernetes operator for StarkNet development networks."""

__version__ = "0.1.0"
