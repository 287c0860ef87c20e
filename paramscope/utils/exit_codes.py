"""Centralized exit codes for the paramscope CLI."""


class ExitCodes:
    """Standard exit codes for paramscope CLI commands."""

    SUCCESS = 0

    PARTIAL = 1

    TASK_INCOMPLETE = 3

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success - all files classified and all endpoints resolved",
            cls.PARTIAL: "Some files failed to classify or some endpoints failed to resolve",
            cls.TASK_INCOMPLETE: "Task could not be completed due to missing prerequisites",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")
