from setuptools import setup, find_packages

setup(
    name="modeleval",
    version="0.1.0",
    author="Sanjan Muchandimath",
    description="Log-density and gradient evaluation of statistical models for generic inference algorithms",
    packages=find_packages(include=["modeleval", "modeleval.*"]),
    install_requires=["numpy", "torch"],
    extras_require={"test": ["pytest", "scipy"]},
    python_requires=">=3.8",
)
