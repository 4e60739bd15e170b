"""Permission management for shell command execution.

This module provides the command safety classifier used by the shell tool to
refuse destructive commands and annotate the rest with a reversibility tier.

Example:
    >>> from sharkbait.ai.tools.permissions import CommandClassifier
    >>> classifier = CommandClassifier()
    >>> classifier.classify("mkdir build").reversibility
    <Reversibility.EASY: 'easy'>
"""

from sharkbait.ai.tools.permissions.classifier import (
    BLOCKING_RULES,
    CLASSIFICATION_RULES,
    DEFAULT_CLASSIFICATION,
    Classification,
    CommandClassifier,
    CommandRule,
)

__all__ = [
    "BLOCKING_RULES",
    "CLASSIFICATION_RULES",
    "DEFAULT_CLASSIFICATION",
    "Classification",
    "CommandClassifier",
    "CommandRule",
]
