"""Pixel processing backends for lenticular."""

from .resample import resample

__all__ = ['resample']
