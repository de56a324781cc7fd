from setuptools import setup, find_packages

setup(
    name="connect4_solver",
    version="0.1",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "rich",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "connect4-solver=connect4_solver.cli:main",
        ],
    },
)
