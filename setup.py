from setuptools import setup, find_packages


setup(
    name="adlerz",
    version="0.1",
    packages=find_packages(include=["adlerz", "adlerz.*"]),
    description="Adler-32 checksum engines (scalar and NumPy data-parallel) with zlib-style container framing.",
    author="vercingetorx",
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.22",
    ],
)
