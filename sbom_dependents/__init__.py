"""SBOM Dependents: find what transitively depends on a package in an SBOM graph."""

__version__ = "0.1.0"
