"""
API Routes - one router per area, mounted under /api/v1 by create_app()
"""
