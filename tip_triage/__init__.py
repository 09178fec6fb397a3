"""
Tip Triage - credibility scoring and review queueing for missing-person tips.

Crowd-submitted tips are scored by independent signal extractors, annotated
for duplicates and hoax indicators, classified into SLA-tracked review queues,
and resolved by human reviewers whose decisions feed tipster reputation back
into future scoring.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
