#!/usr/bin/env python3
"""Setup script for Azure Disk Auditor"""
from setuptools import setup, find_packages

setup(
    name="azure-disk-auditor",
    version="1.0.0",
    description="Tenant-wide Azure VM, VMSS and managed disk migration audit",
    author="Azure Cost Optimization Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "azure-identity>=1.12.0",
        "azure-mgmt-compute>=29.0.0",
        "azure-mgmt-storage>=20.0.0",
        "azure-mgmt-subscription>=3.1.1",
        "openpyxl>=3.1.0",
        "pyyaml>=6.0",
        "rich>=12.0.0",
        "typer>=0.7.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "azure-disk-auditor=azure_disk_auditor.cli.main:main",
        ],
    },
    python_requires=">=3.8",
)
