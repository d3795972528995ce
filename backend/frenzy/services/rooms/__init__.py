"""Room domain services: deck, live room store, scoring, timers and the
coordinator that drives a room from lobby to finished.

Socket handlers and HTTP routes import from here, keeping transport
concerns separated from core game mechanics.
"""
