"""
API Routes - HTTP endpoint handlers

Each area (devices, system) gets its own router; all are included in the main
FastAPI app.
"""
