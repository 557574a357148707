"""Roster: companies and users REST API."""
