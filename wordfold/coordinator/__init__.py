"""Splitting, shuffling and coordination of pipeline runs."""
