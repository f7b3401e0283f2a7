"""Clients for remote .NET release metadata."""
