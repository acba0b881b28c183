"""Outbreak test suite."""
