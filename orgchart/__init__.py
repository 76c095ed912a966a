"""Org Chart - employee directory and organisation hierarchy backend."""
