"""Core helpers independent of any single provider."""
