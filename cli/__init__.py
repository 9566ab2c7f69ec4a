"""CLI package for the UDP temperature beacon."""
