from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="sydney-e2e",
    version="1.0.0",
    description="End-to-end browser tests for the Sydney WordPress theme demo site",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["sydney_e2e", "sydney_e2e.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: Pytest",
        "Topic :: Software Development :: Testing",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "sydney-e2e-auth=sydney_e2e.bootstrap:main",
        ],
    },
)
