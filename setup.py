"""
Setup configuration for procdom.

Installs the verifier engine (procdom), its HTTP client (procdom_sdk) and the
'procdom-verify' command, which wraps the click interface in main.py.
"""

from pathlib import Path

from setuptools import find_packages, setup

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

# Read version from constants.py
version = "0.3.0"  # Fallback if constants.py is not readable
constants_path = this_directory / "procdom" / "constants.py"
if constants_path.exists():
    for line in constants_path.read_text(encoding="utf-8").splitlines():
        if line.startswith("PROCDOM_VERSION"):
            version = line.split('"')[1]
            break

# Read requirements
requirements = []
with open(this_directory / "requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

# Read dev requirements
dev_requirements = []
dev_path = this_directory / "requirements-dev.txt"
if dev_path.exists():
    with open(dev_path) as f:
        dev_requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="procdom",
    version=version,
    description="Conformance verifier for process instance domains of a remote metrics service",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["procdom", "procdom.*", "procdom_sdk", "procdom_sdk.*"]),
    py_modules=["main"],  # Include main.py at root level
    entry_points={
        "console_scripts": [
            "procdom-verify=main:main",
        ],
    },
    install_requires=requirements,
    extras_require={
        "dev": dev_requirements,
        "test": dev_requirements,
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Monitoring",
        "Topic :: Software Development :: Testing",
    ],
    keywords="metrics conformance process instance-domain verifier",
)
