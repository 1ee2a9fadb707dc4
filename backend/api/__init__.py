"""
FinePrint API Module
====================
FastAPI routers for the FinePrint API.
"""

from api.analyze import router as analyze_router
from api.extract import router as extract_router
from api.upload import router as upload_router

__all__ = ["upload_router", "extract_router", "analyze_router"]
