"""Clients for external services (AWS, FCM)."""
