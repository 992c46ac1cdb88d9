"""Conversion services: single-request pipeline, batch conversion, progress and summary."""
