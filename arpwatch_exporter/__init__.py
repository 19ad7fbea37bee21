"""Prometheus exporter for arpwatch device data."""

__version__ = "0.1.0"
