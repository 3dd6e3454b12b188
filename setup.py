"""Setup script for review-orchestra."""
from setuptools import setup, find_packages

dependencies = [
    "rich>=13.0.0",
    "prompt-toolkit>=3.0.52",
    "python-dotenv",
    "PyYAML>=6.0",
]

setup(
    name="review-orchestra",
    version="1.0.0",
    description="Install and manage a Claude PR review agent, its commands and backups",
    license="MIT",
    python_requires=">=3.11,<4.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=dependencies,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "orchestra=review_orchestra:cli_main",
        ],
    },
    package_data={
        "review_orchestra": [
            "bundle/*.md",
            "bundle/*.json",
            "bundle/agents/*.md",
            "bundle/commands/*.md",
        ],
    },
)
