"""
    Normalize captured compiler/toolchain output into source-mapped display lines.
"""
__version__ = "0.1.0"
