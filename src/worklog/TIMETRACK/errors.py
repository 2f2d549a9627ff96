# TIMETRACK/errors.py


class WorklogError(Exception):
    """Base class for every failure the tracker reports to the command line."""


class InvalidName(WorklogError):
    def __init__(self, name: str = ""):
        super().__init__("Activity name must not be empty.")
        self.name = name


class InvalidDuration(WorklogError):
    def __init__(self, hours: float):
        super().__init__(f"Hours must be positive and within range (got {hours}).")
        self.hours = hours


class AlreadyTracking(WorklogError):
    def __init__(self, name: str):
        super().__init__(f"Existing session '{name}' still running. Stop it first.")
        self.name = name


class NoActiveSession(WorklogError):
    def __init__(self):
        super().__init__("No running session.")


class OverlappingSession(WorklogError):
    def __init__(self, name: str):
        super().__init__(f"Logged time overlaps the session '{name}'.")
        self.name = name


class CorruptLog(WorklogError):
    pass


class PersistenceError(WorklogError):
    pass


class ConcurrentAccess(WorklogError):
    def __init__(self, path):
        super().__init__(f"Log file {path} is in use by another worklog process. Try again.")
        self.path = path


class FutureEnd(WorklogError):
    def __init__(self, end):
        super().__init__(f"Logged time cannot end in the future ({end.isoformat()}).")
        self.end = end
