"""
TIFF input/output for lenticular.
"""
