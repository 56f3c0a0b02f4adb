from setuptools import setup, find_packages

setup(
    name="pixel-trace",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    package_data={"pixeltrace": ["config/*.yaml"]},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "opencv-python",
        "scipy",
        "lxml",
        "Pillow>=9.1",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "pixeltrace=pixeltrace.main:main",
        ],
    },
)
