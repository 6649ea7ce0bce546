from setuptools import setup, find_packages

setup(
    name="loa_engine",
    version="0.1",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "numpy",
        "torch",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "loa-engine=loa_engine.cli:main",
        ],
    },
)
