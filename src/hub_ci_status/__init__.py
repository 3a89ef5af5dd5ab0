"""hub-ci-status - Print the CI status of a GitHub commit."""

__version__ = "0.1.0"
