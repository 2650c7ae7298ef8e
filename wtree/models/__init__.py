"""Data models for wtree."""
