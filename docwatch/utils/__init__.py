"""Configuration, store handle and shared helpers."""
