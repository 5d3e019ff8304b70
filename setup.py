#!/usr/bin/env python3
"""
Inquiry Intake Setup Configuration
Contact-form intake service with Mailchimp and webhook relays
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

with open("requirements-test.txt", "r", encoding="utf-8") as fh:
    test_requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="inquiry-intake",
    version="1.0.0",
    description="Contact-form intake API with mailing-list and webhook relays",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["api", "api.*", "backend", "backend.*", "core", "core.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": test_requirements,
    },
    include_package_data=True,
    keywords="contact-form inquiry mailchimp webhook fastapi",
)
