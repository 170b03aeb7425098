"""Human and JSON rendering of StageResult."""
