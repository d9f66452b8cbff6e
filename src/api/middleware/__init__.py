"""
API Middleware - exception handlers that keep every reply in one envelope
"""
