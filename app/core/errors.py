class EngineError(Exception):
    """Base class for failures surfaced by the outfit engine."""


class CollaboratorError(EngineError):
    """A lookup the engine depends on failed. Not retried here."""

    def __init__(self, collaborator: str, message: str = ""):
        self.collaborator = collaborator
        self.message = message or f"{collaborator} lookup failed"
        super().__init__(self.message)


class NoLocationError(EngineError):
    """No coordinates were given and the user has no stored location."""


class SuggestTimeoutError(EngineError):
    """The request deadline passed between scoring batches."""


class EmptyPaletteError(ValueError):
    """Closest-color query against an empty palette."""


class EmbeddingModelLoadError(RuntimeError):
    """The CLIP model could not be acquired."""


class EmbeddingInferenceError(RuntimeError):
    """The CLIP model was loaded but failed on a single image."""
