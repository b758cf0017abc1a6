"""Blu-ray BDMV playlist catalogue."""
