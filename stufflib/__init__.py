"""Small, self-contained utilities: hashing, sorting, text, compression, PNG images and record files."""

__version__ = "0.1.0"