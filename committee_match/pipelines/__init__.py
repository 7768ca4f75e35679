"""Pipelines turning validated requests into completion calls.

Kept separate from the HTTP layer so they can be called and tested directly.
"""
