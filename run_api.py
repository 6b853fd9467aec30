#!/usr/bin/env python3
"""
Script to run the books API server.
"""

import uvicorn

from books_api.config import config


def main():
    """Run the API server."""
    print("Starting books API server")
    print(f"Host: {config.host}")
    print(f"Port: {config.port}")
    print(f"Debug: {config.debug}")
    print(f"Database: {config.database_path}")
    print(f"Docs: {config.docs_url()}")
    print("=" * 50)

    uvicorn.run(
        "books_api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower(),
        access_log=True
    )


if __name__ == "__main__":
    main()
