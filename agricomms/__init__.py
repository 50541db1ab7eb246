"""Notification and cooperative communication service."""
