from setuptools import setup, find_packages

setup(
    name="reputestack",
    version="0.1.0",
    description="Reputation scores for AI agents from task-outcome attestations",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "fastapi>=0.110",
        "pydantic>=2.0",
        "slowapi>=0.1.9",
        "limits>=3.0",
        "python-json-logger>=3.1",
        "httpx>=0.24",
        "uvicorn>=0.23",
    ],
    extras_require={"dev": ["pytest>=7.0", "pytest-asyncio>=0.21"]},
    entry_points={"console_scripts": ["reputestack=reputestack.cli:main"]},
    python_requires=">=3.9",
    license="CC0-1.0",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Framework :: FastAPI",
        "Topic :: Software Development :: Libraries",
        "License :: CC0 1.0 Universal (CC0 1.0) Public Domain Dedication",
        "Programming Language :: Python :: 3",
    ],
    keywords="agent trust reputation attestation scoring",
)
