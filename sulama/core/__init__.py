"""
Core utilities shared across the Sulama Asistanı API.

- configuration (env vars, paths, model names)
- logging setup
- application errors
- password hashing and admin key checks
- rate limit helpers
- the OpenAI client factory
"""
