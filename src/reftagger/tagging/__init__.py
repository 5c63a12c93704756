"""Citation tagging for HTML documents."""

from reftagger.tagging.annotator import Reftagger
from reftagger.tagging.nodes import ANNOTATION_CLASS, TextNodeIterator

__all__ = ["ANNOTATION_CLASS", "Reftagger", "TextNodeIterator"]
