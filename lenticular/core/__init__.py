"""Core composition engine for lenticular."""
