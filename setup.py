"""Setup script for the cafe console API and client"""
from setuptools import setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="cafe-console",
    version="0.1.0",
    author="Cafe Console Team",
    description="Admin sessions, presence tracking and role-based access for a cafe admin console",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={
        "cafe_api": "backend/cafe_api",
        "cafeconsole": "sdk/cafeconsole",
    },
    packages=[
        "cafe_api",
        "cafe_api.api",
        "cafe_api.middleware",
        "cafe_api.models",
        "cafe_api.schemas",
        "cafe_api.utils",
        "cafeconsole",
    ],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110.0",
        "sqlalchemy>=2.0.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "python-jose[cryptography]>=3.3.0",
        "cryptography>=41.0.0",
        "argon2-cffi>=23.1.0",
        "slowapi>=0.1.9",
        "prometheus-client>=0.19.0",
        "prometheus-fastapi-instrumentator>=6.1.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "server": [
            "uvicorn>=0.27.0",
        ],
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.25.0",
        ],
    },
)
