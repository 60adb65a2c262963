"""
High-level use cases for the Sulama Asistanı API.

Each service module orchestrates repositories and domain rules to implement
business rules (register, consume a question, save a design, export a PDF).

Routers (FastAPI endpoints) call these services instead of manipulating the
users file directly.
"""
