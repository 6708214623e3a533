"""
Data Collection Module
Orchestrator, stage router, extractors and the queue/dataset collaborators.

Note: do not import subpackages here to keep package import side-effect free.
Import needed classes directly from their modules.
"""

__all__: list[str] = []
