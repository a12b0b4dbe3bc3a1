# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Setup configuration for the Nodeflow workflow automation backend
"""

from setuptools import setup, find_packages

setup(
    name="nodeflow",
    version="0.1.0",
    description="Node-graph workflow automation backend with live SSE progress",
    author="Jason Cafarelli",
    package_dir={"": "backend"},
    packages=find_packages(where="backend", exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "pydantic>=2.5.0",
        "httpx>=0.27.0",
        "aiofiles>=23.2.0",
        "PyYAML>=6.0",
        "python-dotenv>=1.0.0",
        "openai>=1.30.0",
        "psycopg[binary]>=3.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.23.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "nodeflow=nodeflow.main:main",
        ]
    },
)
