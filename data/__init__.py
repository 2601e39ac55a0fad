"""Seed data and synthetic ledger generation."""
