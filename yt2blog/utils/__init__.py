"""Utility helpers shared across yt2blog."""
