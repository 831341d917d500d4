from setuptools import setup, find_packages

setup(
    name="eks-idp-reconciler",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "boto3",
        "botocore",
        "cli-core-yo<2",
        "pydantic>=2",
        "PyYAML",
        "rich",
        "typer",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "eks-idp=eks_idp.cli:main",
        ],
    },
)
