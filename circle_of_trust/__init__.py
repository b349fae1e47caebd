"""
Circle of Trust

Discrete-event simulation of a code-review workflow, used to estimate how
many code owners a codebase needs given developer and reviewer error rates
and the number of lines one reviewer can vouch for.
"""

__version__ = "0.1.0"
