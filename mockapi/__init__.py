"""
Mock API: a file-backed CRUD record store for local development and tests.
"""
