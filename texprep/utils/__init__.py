"""Loader and tone-matching helpers."""
