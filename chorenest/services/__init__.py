from chorenest.services import chore_service, schedule_service


__all__ = [
    "chore_service",
    "schedule_service",
]
