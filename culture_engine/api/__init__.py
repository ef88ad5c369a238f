"""
API Layer

HTTP handlers, request mapping and authorization.
The app is built by `culture_engine.api.server.create_app`.
"""
