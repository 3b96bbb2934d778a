#!/usr/bin/env python3
"""
Simple Backend Starter
Runs the Entérate API with auto-reload for local development
"""

import logging
import os
import sys

import uvicorn

if __name__ == "__main__":
    # Run from the project root so .env and the local SQLite file resolve there
    project_dir = os.path.dirname(os.path.abspath(__file__))
    os.chdir(project_dir)
    sys.path.insert(0, project_dir)

    logging.basicConfig(level=logging.INFO)

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    print(f"🚀 Starting Entérate API from: {project_dir}")
    print(f"📡 Server will be available at: http://localhost:{port}")
    print(f"📄 API docs will be available at: http://localhost:{port}/docs")

    uvicorn.run(
        "enterate.main:app",
        host=host,
        port=port,
        reload=True,
        reload_dirs=["./enterate"],
    )
