# repository/namespaces.py
from typing import Final

ROOT: Final[str] = "integrity"

EMBEDDINGS: Final[str] = f"{ROOT}:embeddings"
