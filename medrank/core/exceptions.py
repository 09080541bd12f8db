class TestNotFoundError(ValueError):
    """Raised when no stored Grand Test matches an id."""

    # keep pytest from collecting this as a test class
    __test__ = False

    def __init__(self, test_id: str):
        self.test_id = test_id
        super().__init__(f"Test not found: {test_id}")


class SubjectNotFoundError(ValueError):
    def __init__(self, subject_id: str):
        self.subject_id = subject_id
        super().__init__(f"Unknown subject: {subject_id}")


class FormStateError(ValueError):
    """The entry form was used in a state that does not allow the action."""


class ExportError(ValueError):
    pass


class ExportUnavailableError(RuntimeError):
    pass
