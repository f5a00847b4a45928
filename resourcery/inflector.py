"""
Resourcery Inflector — naming conventions for types, classes and keys.

Thin layer over the ``inflection`` package so every naming rule the engine
relies on goes through one place, plus registration of project-specific
uncountable and irregular words.

Usage:
    from resourcery import inflector

    inflector.uncountable("preferences")
    inflector.irregular("numero_telefone", "numeros_telefone")

    inflector.pluralize("numero_telefone")   # "numeros_telefone"
    inflector.classify("people")              # "Person"
"""

from __future__ import annotations

import logging
import re

import inflection

logger = logging.getLogger("resourcery.inflector")

__all__ = [
    "pluralize",
    "singularize",
    "underscore",
    "camelize",
    "demodulize",
    "classify",
    "uncountable",
    "irregular",
]


def pluralize(word: str) -> str:
    return inflection.pluralize(word)


def singularize(word: str) -> str:
    return inflection.singularize(word)


def underscore(word: str) -> str:
    """``MyModule.PostComment`` → ``my_module/post_comment``."""
    return inflection.underscore(word.replace("::", "/").replace(".", "/"))


def camelize(word: str) -> str:
    """``my_module/post_comment`` → ``MyModule.PostComment``."""
    return ".".join(
        inflection.camelize(part) for part in str(word).split("/")
    )


def demodulize(name: str) -> str:
    """Strip any module prefix: ``api.v2.BookResource`` → ``BookResource``."""
    return re.split(r"::|\.|/", name)[-1]


def classify(word: str) -> str:
    """Record class name for a type: ``"book_comments"`` → ``"BookComment"``."""
    return inflection.camelize(singularize(demodulize(str(word))))


def uncountable(*words: str) -> None:
    """Register words that have no distinct plural."""
    for word in words:
        inflection.UNCOUNTABLES.add(word.lower())
        logger.debug(f"Registered uncountable word '{word}'")


def irregular(singular: str, plural: str) -> None:
    """
    Register an irregular singular/plural pair.

    Rules match the whole word or the last underscore-separated segment,
    so ``api_numero_telefone`` pluralizes like ``numero_telefone``.
    """
    singular_pattern = rf"(?i)(^|_){re.escape(singular)}$"
    plural_pattern = rf"(?i)(^|_){re.escape(plural)}$"

    inflection.PLURALS.insert(0, (plural_pattern, rf"\g<1>{plural}"))
    inflection.PLURALS.insert(0, (singular_pattern, rf"\g<1>{plural}"))
    inflection.SINGULARS.insert(0, (singular_pattern, rf"\g<1>{singular}"))
    inflection.SINGULARS.insert(0, (plural_pattern, rf"\g<1>{singular}"))
    logger.debug(f"Registered irregular inflection '{singular}' -> '{plural}'")
