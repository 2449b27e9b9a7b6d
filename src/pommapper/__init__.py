"""POM version mapper for Maven-style artifact repositories."""

__version__ = "0.1.0"
