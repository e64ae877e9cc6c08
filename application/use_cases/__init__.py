"""
Use cases combining stored data with the training load engine.
"""

from application.use_cases.analyze_training import AnalyzeTrainingUseCase, TrainingSnapshot

__all__ = [
    "AnalyzeTrainingUseCase",
    "TrainingSnapshot",
]
