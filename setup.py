"""Setup pour Paie IRSA."""

from setuptools import setup, find_namespace_packages

setup(
    name="paie_irsa",
    version="1.0.0",
    description="Calcul de l'IRSA et des cotisations CNAPS / OSTIE pour la paie a Madagascar",
    author="AJ",
    python_requires=">=3.10",
    packages=find_namespace_packages(include=["paie_irsa", "paie_irsa.*"]),
    entry_points={
        "console_scripts": [
            "paie-irsa=paie_irsa.main:main",
        ],
    },
    install_requires=[
        "pydantic>=2.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
)
