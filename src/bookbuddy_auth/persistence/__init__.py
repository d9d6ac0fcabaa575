"""Persistence implementations for bookbuddy_auth."""
