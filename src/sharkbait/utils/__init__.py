"""Utility helpers for Sharkbait."""
