"""Core logic for the Briquette estimator.

Acreage conversion, debounced input, report fetching and the Gemini
provider layer.  It has ZERO dependency on any UI framework.
"""

__version__ = "0.1.0"
