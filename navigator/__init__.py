"""Pendle Yield Navigator: PT/YT pool matching, scoring and recommendations."""
