"""
Backend Entry Point
Run with: python main.py
Or: uvicorn planeta.main:app --reload
"""
import uvicorn

from planeta.core.config import settings

if __name__ == "__main__":
    uvicorn.run("planeta.main:app", host=settings.HOST, port=settings.PORT, reload=settings.is_development)
