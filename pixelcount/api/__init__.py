"""API - FastAPI display surface"""
