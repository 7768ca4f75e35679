"""Committee matching service: config, models, pipeline and HTTP API.

A stateless translator between one HTTP request and one schema-constrained
completion call.
"""
