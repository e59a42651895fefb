from setuptools import setup, find_packages

setup(
    name="reelpress",
    version="0.1.0",
    description="reelpress - Article to Social Content Pipeline",
    author="Keith Teare",
    author_email="keith@teare.com",
    packages=find_packages(exclude=["tests*"]),
    install_requires=[
        "aiohttp>=3.8.0",
        "beautifulsoup4>=4.10.0",
        "backoff>=2.0.0",
        "async-timeout>=4.0.0",
        "python-dateutil>=2.8.0",
        "tqdm>=4.62.0",
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "reelpress=reelpress.cli:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
