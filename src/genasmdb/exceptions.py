"""exceptions
"""


class GenAsmDBError(Exception):
    def wrap(self, context):
        """same kind and attributes, message prefixed with context"""
        error = self.__class__.__new__(self.__class__)
        error.__dict__.update(self.__dict__)
        error.args = (f"{context}: {self}",)
        return error


class ResourceReadError(GenAsmDBError, OSError):
    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        msg = f"read {path}"
        if reason is not None:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class MarkerNotFound(GenAsmDBError, ValueError):
    def __init__(self, marker):
        if isinstance(marker, bytes):
            marker = marker.decode("UTF-8", errors="replace")
        self.marker = marker
        super().__init__(f"could not find {marker!r} magic comment")


class EmptyPayload(GenAsmDBError, ValueError):
    def __init__(self, msg="no data between magic comments"):
        super().__init__(msg)


class SchemaMismatch(GenAsmDBError, ValueError):
    def __init__(self, path, msg):
        self.path = path
        if path:
            msg = f"{path}: {msg}"
        super().__init__(msg)


# a raw instruction must be exactly (name, operands, encoding, opcode, metadata)
class MalformedInstructionTuple(SchemaMismatch):
    def __init__(self, index, entry):
        self.index = index
        self.entry = entry
        super().__init__(path=f"instructions[{index}]",
            msg=f"expected 5 strings, got {entry!r}")
