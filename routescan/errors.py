from __future__ import annotations


class RouteScanError(Exception):
	"""Base class for errors that abort an analysis run."""


class ConfigurationError(RouteScanError):
	"""A build configuration or settings file is missing or cannot be parsed."""

	def __init__(self, path: str, reason: str):
		self.path = path
		self.reason = reason
		super().__init__(f"{path}: {reason}")


class AnalysisInputError(RouteScanError):
	"""The project root handed to the analyzer is not usable."""
