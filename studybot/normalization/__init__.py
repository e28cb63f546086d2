from studybot.normalization.base import BaseNormalizer
from studybot.normalization.factory import NormalizerFactory
from studybot.normalization.normalizer import Normalizer

__all__ = ["BaseNormalizer", "Normalizer", "NormalizerFactory"]
