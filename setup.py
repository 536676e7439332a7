#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Prompt Exporter - Setup Configuration
Enables optional dependency groups for AI enhancement providers.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

# Read requirements
requirements_path = Path(__file__).parent / "requirements.txt"
requirements = []
if requirements_path.exists():
    requirements = [
        line.strip()
        for line in requirements_path.read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.startswith("#")
    ]

# Optional dependencies for AI enhancement
gemini_requirements = [
    "google-generativeai>=0.8.0",
]

openai_requirements = [
    "openai>=1.0.0",
]

setup(
    name="prompt-exporter",
    version="1.0.0",
    description="Convert free-form descriptions into validated, platform-specific prompt exports",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Prompt Exporter Team",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=requirements,
    extras_require={
        # Enhancement providers
        "gemini": gemini_requirements,
        "openai": openai_requirements,

        # Development dependencies
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.26.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.4.0",
        ],

        # All optional features
        "all": gemini_requirements + openai_requirements,
    },
    entry_points={
        "console_scripts": [
            "prompt-exporter=scripts.export_cli:main",
            "prompt-exporter-api=api.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Multimedia :: Graphics",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="prompt midjourney stable-diffusion dall-e runway export fastapi",
)
