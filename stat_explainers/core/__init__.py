"""Numeric core: distributions, resampling, aggregation and summary statistics."""
