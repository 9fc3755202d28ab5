"""Utility modules for hetzner-cli."""
