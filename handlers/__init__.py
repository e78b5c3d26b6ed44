"""
handlers/ - Presentation Layer
================================
FastAPI routes. Each handler parses the request, delegates to the
appropriate Repository, and serializes the result back to the client.
No business logic lives here.
"""
