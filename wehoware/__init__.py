"""Wehoware multi-tenant back-office API."""
