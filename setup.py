from setuptools import find_packages, setup

setup(
    name="commission-reconciler",
    version="0.1.0",
    packages=find_packages(exclude=["reconciler.tests"]),
    python_requires=">=3.9",
    install_requires=[
        "pandas",
        "numpy",
        "openpyxl",
        "click",
        "python-dotenv",
        "rapidfuzz",
        "xlrd"
    ],
    extras_require={"dev": ["pytest"]},
    entry_points={
        "console_scripts": [
            "reconciler=reconciler.cli.main:cli",
        ],
    },
)
