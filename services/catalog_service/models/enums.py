"""Enum definitions for catalog service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class ProgramCategory(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    PROFESSIONAL = "professional"


class Specialization(str, enum.Enum):
    BATTING = "batting"
    BOWLING = "bowling"
    FIELDING = "fielding"
    WICKET_KEEPING = "wicket-keeping"
    ALL_ROUNDER = "all-rounder"
    FITNESS = "fitness"
    MENTAL_COACHING = "mental-coaching"


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class MaterialType(str, enum.Enum):
    VIDEO = "video"
    DOCUMENT = "document"
    IMAGE = "image"
    OTHER = "other"
