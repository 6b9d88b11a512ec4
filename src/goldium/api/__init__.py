"""HTTP API exposing the wallet services."""
