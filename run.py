#!/usr/bin/env python3
"""Run script for seatmanager."""

import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "seatmanager.api.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.getenv("SERVER_PORT", "8080")),
        reload=True
    )
