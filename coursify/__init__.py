"""Coursify course platform backend."""
