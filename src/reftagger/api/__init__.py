"""HTTP API for tagging and verse previews."""
