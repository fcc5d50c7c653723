"""Pinyin typing challenge over a personal Chinese character list."""

__version__ = "0.1.0"
