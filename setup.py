"""
BCE Cloud Python SDK - Setup

Signed access to Baidu AI Cloud object storage (BOS) and log query (BLS).
"""

from setuptools import setup, find_packages
import os

# Read the README
here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

# Read version
about = {}
with open(os.path.join(here, "bcecloud", "__init__.py"), encoding="utf-8") as f:
    for line in f:
        if line.startswith("__version__"):
            exec(line, about)
            break

TEST_REQUIRES = [
    "pytest>=7.0",
    "pytest-asyncio>=0.21",
    "pytest-cov>=4.0",
    "respx>=0.20",
]

setup(
    name="bcecloud",
    version=about["__version__"],
    author="BCE Cloud SDK Team",
    description="Python SDK for Baidu AI Cloud BOS object storage and BLS log query",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.24.0",
    ],
    extras_require={
        "test": TEST_REQUIRES,
        "dev": TEST_REQUIRES + [
            "mypy>=1.0",
            "black>=23.0",
            "ruff>=0.0.270",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Typing :: Typed",
    ],
    keywords=[
        "bce",
        "baidu",
        "cloud",
        "bos",
        "bls",
        "object-storage",
        "logs",
        "sdk",
    ],
    package_data={
        "bcecloud": ["py.typed"],
    },
    zip_safe=False,
)
