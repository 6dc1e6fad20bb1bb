"""
EventStudio API
Event ticketing backend: events, seat booking, QR check-in and analytics.
"""
