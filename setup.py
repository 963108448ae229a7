from __future__ import annotations

from setuptools import find_packages, setup

setup(
    # Core package name (library-first). The repository also hosts the HTTP
    # backend, but the distributable here is the core only.
    name="life-tracker",
    version="0.1.0",
    # Repo convention: backend code lives under `backend/`.
    # Package the tracker core as a normal top-level import
    # (`import life_tracker`) while keeping sources physically under `backend/`.
    package_dir={"": "backend"},
    packages=find_packages(where="backend", include=["life_tracker", "life_tracker.*"]),
    # Seed data for first run.
    package_data={"life_tracker.config": ["*.yaml"]},
    python_requires=">=3.10",
    install_requires=[
        # Keep core deps minimal; optional capabilities are installed via extras.
        "pydantic==2.10.6",
        "pyyaml>=6.0",
    ],
    extras_require={
        # Optional: HTTP backend (backend/server, backend/application, backend/infrastructure).
        "server": [
            "fastapi>=0.110",
            "uvicorn>=0.29",
            "python-dotenv>=1.0",
        ],
        # Optional: test runtime (fastapi.testclient needs httpx).
        "test": [
            "fastapi>=0.110",
            "uvicorn>=0.29",
            "python-dotenv>=1.0",
            "httpx>=0.27",
        ],
        # Convenience: all optional deps.
        "full": [
            "fastapi>=0.110",
            "uvicorn>=0.29",
            "python-dotenv>=1.0",
            "httpx>=0.27",
        ],
    },
)
