"""Setup configuration for textoutline package."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="textoutline",
    version="0.1.0",
    author="Textoutline Team",
    description="Outline text regions across a directory tree of images with EAST and DB detectors",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["textoutline", "textoutline.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
    install_requires=[
        "opencv-python>=4.8.0",  # cv2.dnn.TextDetectionModel_EAST / _DB
        "numpy>=1.24.0",
        "tqdm>=4.65.0",  # For progress bars
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "textoutline=textoutline.cli:main",
        ],
    },
)
