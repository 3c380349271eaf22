"""
FHIR profile cross-reference auditor.

Finds Reference elements in user-authored profiles that target a core FHIR
type for which the same directory already defines a more specific profile.
"""

__version__ = "1.0.0"
