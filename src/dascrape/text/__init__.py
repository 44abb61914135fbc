"""Text-layer element extraction.

Public API
----------
- :func:`extract_elements` — text runs + viewport → sorted :class:`~dascrape.models.Element` list
- :class:`TextItem` — one text run with its transform
- :func:`multiply_transforms` — affine matrix composition
"""

from .elements import (
    IDENTITY,
    TextItem,
    extract_elements,
    item_to_element,
    multiply_transforms,
    sort_elements,
)

__all__ = [
    "IDENTITY",
    "TextItem",
    "extract_elements",
    "item_to_element",
    "multiply_transforms",
    "sort_elements",
]
