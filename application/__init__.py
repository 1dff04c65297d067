"""
Application layer for the program delivery API.

This package contains:
- ports/: Repository and collaborator interfaces the services depend on
- exceptions: Errors raised by services and mapped to HTTP responses
"""
