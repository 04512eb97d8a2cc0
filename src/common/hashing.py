"""Hashing utilities."""

import hashlib


def generate_cluster_id(seed_url: str) -> str:
    """Generate a stable cluster ID from the URL of the cluster's seed article."""
    return hashlib.sha256(f"cluster:{seed_url}".encode()).hexdigest()[:16]
