"""
ConceptWeave Server Entry Point

Run with: python main.py
Or with uvicorn: uvicorn app:app --reload
"""

import os

import uvicorn

if __name__ == "__main__":
    # Use reload only in development
    is_dev = os.getenv("ENVIRONMENT", "development") == "development"

    uvicorn.run(
        "app:app",
        host=os.getenv("CW_HOST", "0.0.0.0"),
        port=int(os.getenv("CW_PORT", "8000")),
        reload=is_dev,
        log_level=os.getenv("CW_LOG_LEVEL", "info").lower(),
    )
