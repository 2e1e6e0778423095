"""Notification and security audit backend of the real-estate portfolio app."""
