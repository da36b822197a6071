"""
Application Layer

Configuration and process setup for running discovery outside of a library
context.

Key Components:
- config.py: Settings loaded from environment variables
- cli.py: Logging configuration and the console entry point
"""
