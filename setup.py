from codecs import open

from setuptools import find_packages, setup

with open("README.md", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="chronostore",
    version="0.1.0",
    author="Chronostore Contributors",
    description="Long-duration storage across representative periods for linopy capacity expansion models",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(exclude=["doc", "test"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "pandas>=1.4",
        "xarray",
        "linopy>=0.4",
    ],
    extras_require={
        "dev": ["pytest", "highspy"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
    ],
)
