"""
Setup script for smart-html-pdf project.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

setup(
    name="smart-html-pdf",
    version="0.1.0",
    packages=find_packages(include=["smart_pdf", "smart_pdf.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "pydantic>=2",
        "pydantic-settings>=2",
        "playwright",
        "python-multipart",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "smart-html-pdf=smart_pdf.cli:main",
        ],
    },
)
