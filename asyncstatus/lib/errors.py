"""Exceptions raised by the edit session and the document parser."""


class DocumentParseError(Exception):
    """An edited document could not be parsed."""

    stage = "parsed"

    def __init__(self, message: str, line: str, line_number: int | None = None):
        self.line = line
        self.line_number = line_number
        location = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{location}{message}")


class MalformedLine(DocumentParseError):
    """A non-blank, non-comment line matched no directive."""

    def __init__(self, line: str, line_number: int | None = None):
        super().__init__(
            f"invalid line format: {line}\n"
            "Expected format: 'done|progress|blocker <description>', "
            "'mood <mood>', or 'notes <text>'",
            line,
            line_number,
        )


class EmptyItemContent(DocumentParseError):
    """An item directive had no content after trimming."""

    def __init__(self, line: str, line_number: int | None = None):
        super().__init__(f"empty content for item: {line}", line, line_number)


class SessionError(Exception):
    """A stage of the edit session failed."""

    stage = "session"

    def __init__(self, message: str, stage: str | None = None):
        if stage is not None:
            self.stage = stage
        super().__init__(message)


class TempResourceError(SessionError):
    """Creating, writing or removing the temporary document failed."""

    stage = "document_written"


class EditorLaunchError(SessionError):
    """No editor could be resolved, or the editor failed."""

    stage = "editor_run"


class SubmissionError(SessionError):
    """The store rejected or failed to apply the replacement record."""

    stage = "submitted"


class FetchError(SessionError):
    """The current record could not be read from the store."""

    stage = "fetched"
