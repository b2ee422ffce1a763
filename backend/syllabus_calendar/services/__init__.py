from .extraction_orchestrator import ExtractionOrchestrator, Extractor, reconcile

__all__ = ["ExtractionOrchestrator", "Extractor", "reconcile"]
