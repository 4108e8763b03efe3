"""Incremental place search with debounced fetching and client-side pagination."""
