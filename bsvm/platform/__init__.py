"""Operating-system seams: subprocess execution and filesystem helpers."""
