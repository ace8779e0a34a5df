from __future__ import annotations

import os
import threading
from typing import Any, List, Optional, Tuple

import torch
import open_clip
from PIL import Image

from app.core.config import settings
from app.core.errors import EmbeddingInferenceError, EmbeddingModelLoadError


def _device() -> torch.device:
    return torch.device("cpu")


class ClipEmbedder:
    """Owns one CLIP model for the life of the process.

    ``load()`` is the only place the model is acquired; later calls reuse it.
    """

    def __init__(self, model_name: Optional[str] = None, pretrained: Optional[str] = None) -> None:
        self.model_name = model_name or settings.CLIP_MODEL
        ckpt = os.environ.get("CLIP_CHECKPOINT_PATH") or settings.CLIP_CHECKPOINT_PATH
        self.pretrained = pretrained or (ckpt if ckpt and os.path.exists(ckpt) else settings.CLIP_PRETRAINED)
        self._handle: Optional[Tuple[Any, Any]] = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._handle is not None

    def load(self) -> Tuple[Any, Any]:
        if self._handle is not None:
            return self._handle
        with self._lock:
            if self._handle is None:
                try:
                    model, _, preprocess = open_clip.create_model_and_transforms(self.model_name, pretrained=self.pretrained)
                except Exception as exc:
                    raise EmbeddingModelLoadError(f"failed to load CLIP {self.model_name}/{self.pretrained}: {exc}") from exc
                model.to(_device())
                model.eval()
                self._handle = (model, preprocess)
        return self._handle

    def embed(self, img: Image.Image) -> List[float]:
        model, preprocess = self.load()
        try:
            with torch.no_grad():
                image = preprocess(img.convert("RGB")).unsqueeze(0).to(_device())
                emb = model.encode_image(image)
        except Exception as exc:
            raise EmbeddingInferenceError(f"CLIP inference failed: {exc}") from exc
        emb = emb / emb.norm(dim=-1, keepdim=True)
        return emb.squeeze(0).cpu().tolist()


_embedder: Optional[ClipEmbedder] = None


def get_embedder() -> ClipEmbedder:
    global _embedder
    if _embedder is None:
        _embedder = ClipEmbedder()
    return _embedder
