"""
db/ - Database Layer
====================
Loads the credentials, secures the connection with TLS, owns the connection
pool and runs raw SQL. This layer is the lowest in the architecture and has
no dependencies on other layers.
"""
