"""Endpoint helpers split out of ``service.app``."""
