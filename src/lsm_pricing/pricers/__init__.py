from .lsm import ExercisePolicy, LSMPricer

__all__ = ["LSMPricer", "ExercisePolicy"]
