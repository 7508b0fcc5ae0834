from setuptools import setup, find_packages

setup(
    name="hostagent",
    version="0.1.0",
    description="hostagent - offline command submission and supervised update execution for a host management agent",
    author="hostagent Team",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "typer>=0.16.0",
        "rich>=13.7.1",
        "python-dotenv>=1.0.1",
        "psutil>=5.9.8",
        "httpx>=0.27.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.3.2",
        ],
    },
    entry_points={
        "console_scripts": [
            "hostagent=hostagent.apps.cli.app:app",
        ],
    },
)
