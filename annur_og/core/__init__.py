"""Configuration for the OG generator service."""
