"""Fetch, normalize and summarize pipeline."""
