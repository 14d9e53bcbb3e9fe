"""goldenpath: call-graph based Golden Path / Risk Path analysis of code changes.

The codebase is modeled as a call graph (``goldenpath.graph``); every candidate
call path touched by a change is scored on two independent axes, business
intent and engineering risk (``goldenpath.scoring``), then classified, ranked
and summarized for review (``goldenpath.paths``).
"""

__version__ = "0.4.0"
