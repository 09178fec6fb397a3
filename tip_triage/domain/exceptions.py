"""Root of the tip triage error hierarchy."""


class TipTriageError(Exception):
    """Base class for every typed engine failure.

    Subclasses live in tip_triage.domain.errors; the API maps each family
    to an HTTP status in tip_triage.api.problem_details.
    """
