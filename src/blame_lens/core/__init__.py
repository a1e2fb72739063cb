"""Blame annotation engine."""
