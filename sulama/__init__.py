"""Sulama Asistanı: irrigation-advice chatbot backend."""

__version__ = "1.0.0"
