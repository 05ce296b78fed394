from setuptools import setup, find_packages

setup(
    name="admissionsim",
    version="0.1.0",
    description="Fixed-step simulator of an admission-controlled request pipeline",
    author="adamfilli",
    packages=find_packages(include=["admissionsim", "admissionsim.*"]),
    install_requires=[
        "matplotlib",
        "numpy",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "admissionsim=admissionsim.cli:main",
        ],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
