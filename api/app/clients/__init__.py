"""Outbound HTTP clients for metadata and thumbnail downloads."""
