"""Pruning and writing of the extracted tree."""
