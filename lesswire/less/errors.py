class LessError(Exception):
    """
    Base class for errors raised while compiling LESS source. Carries the source location the error was raised at,
    when one is known.
    """
    def __init__(self, message, filename=None, line=None, column=None):
        """
        :param message: Error description.
        :type message: str
        :param filename: Source file the error occurred in.
        :type filename: str | None
        :param line: 1 based line number.
        :type line: int | None
        :param column: 1 based column number.
        :type column: int | None
        """
        super().__init__(message)
        self.message = message
        self.filename = filename
        self.line = line
        self.column = column

    def __str__(self):
        parts = [self.message]
        if self.filename is not None:
            parts.append('in {0}'.format(self.filename))
        if self.line is not None:
            parts.append('on line {0}, column {1}'.format(self.line, self.column))
        return ' '.join(parts)

    @classmethod
    def at(cls, message, pos, **kwargs):
        """
        Create an error positioned at a token or node position.

        :param pos: Position tuple of (filename, line, column), or None.
        :type pos: tuple[str | None, int, int] | None
        :rtype: LessError
        """
        if pos is None:
            return cls(message, **kwargs)
        return cls(message, pos[0], pos[1], pos[2], **kwargs)


class LessSyntaxError(LessError):
    pass


class LessReferenceError(LessError):
    """
    Raised when a variable or detached ruleset is referenced but never declared.
    """
    def __init__(self, message, filename=None, line=None, column=None, name=None):
        super().__init__(message, filename, line, column)
        self.name = name


class LessImportError(LessError):
    pass


class LessCompileError(LessError):
    pass
