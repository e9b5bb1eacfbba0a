"""Amana storefront: catalog browsing and a storage-backed cart."""
