"""
ChargeRoute
SOC-aware route planning for electric vehicles over a charging-station graph
"""

from setuptools import setup, find_packages
import os

# Read the contents of README file
this_directory = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_directory, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name="chargeroute",
    version="1.0.0",
    description="SOC-aware cost/time-optimal EV routing over charging-station graphs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.21.0",
        "networkx>=3.1.0",
        "pydantic>=2.0.0",
        "python-dotenv>=1.0.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "chargeroute-solve=app.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
