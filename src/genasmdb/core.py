import collections as _collections
import dataclasses as _dataclasses
import functools as _functools
import json as _json

import mdis.dispatcher
import mdis.walker

from genasmdb.exceptions import (
    SchemaMismatch as _SchemaMismatch,
    MalformedInstructionTuple as _MalformedInstructionTuple,
)
from genasmdb.util import (
    log as _log,
    LogType as _LogType,
)


class DataclassMeta(type):
    def __new__(metacls, name, bases, ns):
        cls = super().__new__(metacls, name, bases, ns)
        return _dataclasses.dataclass(cls, eq=True, frozen=True)


class Dataclass(metaclass=DataclassMeta):
    pass


def typename(value):
    if value is None:
        return "null"
    return {
        bool: "boolean",
        int: "number",
        float: "number",
        str: "string",
        list: "array",
        dict: "object",
    }.get(type(value), type(value).__name__)


def join(path, key):
    if isinstance(key, int):
        return f"{path}[{key}]"
    if not path:
        return key
    return f"{path}.{key}"


def string(value, path):
    if not isinstance(value, str):
        raise _SchemaMismatch(path, f"expected string, got {typename(value)}")
    return value


def hook(type):
    if type is str:
        return string
    return type.JSON


def dataclass(cls, record, path, keymap=None, typemap=None):
    """decode a JSON object into cls, matching keys to fields by exact name.

    keys named by keymap are renamed before matching, and a field that
    keymap renames only matches through its keymap key; keys with no field
    are skipped, null values count as absent.
    """
    if keymap is None:
        keymap = {}
    if typemap is None:
        typemap = {field.name:field.type for field in _dataclasses.fields(cls)}
    if not isinstance(record, dict):
        raise _SchemaMismatch(path, f"expected object, got {typename(record)}")

    names = {name:key for (key, name) in keymap.items()}
    keys = {}
    unknown = []
    for key in record:
        if key in names and key not in keymap:
            unknown.append(key)
        else:
            keys[keymap.get(key, key)] = key
    fields = {}
    for field in _dataclasses.fields(cls):
        key = keys.pop(field.name, None)
        if key is None or record[key] is None:
            required = (field.default is _dataclasses.MISSING and
                        field.default_factory is _dataclasses.MISSING)
            if required:
                key = names.get(field.name, field.name)
                raise _SchemaMismatch(join(path, key), "missing")
            continue
        fields[field.name] = hook(typemap[field.name])(record[key],
            join(path, key))

    for key in sorted(unknown + list(keys.values())):
        _log("skip unknown key", join(path, key), kind=_LogType.Decode)

    return cls(**fields)


class Array(tuple):
    item = str

    @classmethod
    def JSON(cls, value, path):
        if not isinstance(value, list):
            raise _SchemaMismatch(path, f"expected array, got {typename(value)}")
        item = hook(cls.item)
        return cls(item(entry, join(path, index))
            for (index, entry) in enumerate(value))


class Strings(Array):
    pass


class Record(Dataclass):
    @classmethod
    def JSON(cls, record, path):
        return dataclass(cls, record, path)


class Extension(Record):
    """available extension, instructions name it in their metadata"""
    name: str


class Attribute(Record):
    """available attribute, instructions name it in their metadata"""
    name: str
    type: str
    doc: str


class SpecialRegister(Record):
    """special register (or a part of one) instructions read or write"""
    name: str
    group: str
    doc: str


class Shortcut(Record):
    """name usable inside instruction metadata, expands to `expand`"""
    name: str
    expand: str


class RegisterClass(Record):
    names: Strings
    kind: str
    any: str = None


class Registers(Record):
    bnd: RegisterClass = None
    creg: RegisterClass = None
    dreg: RegisterClass = None
    k: RegisterClass = None
    mm: RegisterClass = None
    r16: RegisterClass = None
    r32: RegisterClass = None
    r64: RegisterClass = None
    r8: RegisterClass = None
    r8hi: RegisterClass = None
    rxx: RegisterClass = None
    sreg: RegisterClass = None
    st: RegisterClass = None
    tmm: RegisterClass = None
    xmm: RegisterClass = None
    ymm: RegisterClass = None
    zmm: RegisterClass = None

    def classes(self):
        for field in _dataclasses.fields(self):
            regclass = getattr(self, field.name)
            if regclass is not None:
                yield (field.name, regclass)


class Instruction(Dataclass):
    name: str
    operands: str
    encoding: str
    opcode: str
    metadata: str

    @classmethod
    def raw(cls, index, entry):
        if (not isinstance(entry, (tuple, list)) or
                len(entry) != 5 or
                not all(isinstance(item, str) for item in entry)):
            raise _MalformedInstructionTuple(index=index, entry=entry)

        (name, operands, encoding, opcode, metadata) = entry
        return cls(name=name, operands=operands,
            encoding=encoding, opcode=opcode, metadata=metadata)


class Extensions(Array):
    item = Extension


class Attributes(Array):
    item = Attribute


class SpecialRegisters(Array):
    item = SpecialRegister


class Shortcuts(Array):
    item = Shortcut


class RawInstructions(Array):
    @classmethod
    def JSON(cls, value, path):
        if not isinstance(value, list):
            raise _SchemaMismatch(path, f"expected array, got {typename(value)}")
        entries = []
        for (index, entry) in enumerate(value):
            # validated here so that arity errors surface while decoding
            insn = Instruction.raw(index=index, entry=entry)
            entries.append((insn.name, insn.operands,
                insn.encoding, insn.opcode, insn.metadata))
        return cls(entries)


class Database(Dataclass):
    architectures: Strings = Strings()
    extensions: Extensions = Extensions()
    attributes: Attributes = Attributes()
    special_regs: SpecialRegisters = SpecialRegisters()
    shortcuts: Shortcuts = Shortcuts()
    registers: Registers = None
    instructions: RawInstructions = RawInstructions()

    __KEYMAP = {
        "specialRegs": "special_regs",
    }

    @classmethod
    def JSON(cls, record, path=""):
        return dataclass(cls, record, path, keymap=Database.__KEYMAP)

    def instruction_records(self):
        return tuple(Instruction.raw(index=index, entry=entry)
            for (index, entry) in enumerate(self.instructions))

    def detach(self):
        """split into (database without instructions, instruction records)"""
        insns = self.instruction_records()
        return (_dataclasses.replace(self, instructions=RawInstructions()),
            insns)

    def expand(self, metadata):
        shortcuts = {shortcut.name:shortcut.expand
            for shortcut in self.shortcuts}
        return " ".join(shortcuts.get(token, token)
            for token in metadata.split())

    def __iter__(self):
        yield from self.instruction_records()

    # per-instance cache: dies with the database
    @_functools.cached_property
    def names(self):
        names = _collections.defaultdict(list)
        for insn in self:
            names[insn.name].append(insn)
        return {name:tuple(insns) for (name, insns) in names.items()}

    def __getitem__(self, key):
        if not isinstance(key, str):
            raise ValueError("instruction name expected")
        return self.names.get(key, ())


def decode(data):
    try:
        record = _json.loads(data)
    except ValueError as error:
        raise _SchemaMismatch("", f"invalid JSON: {error}") from error

    db = Database.JSON(record)
    _log("decode", len(db.architectures), "architectures",
        len(db.instructions), "instructions", kind=_LogType.Decode)
    return db


class Walker(mdis.walker.Walker):
    @mdis.dispatcher.Hook(Database)
    def dispatch_database(self, instance):
        fields = _dataclasses.fields(instance)
        yield from self(tuple(getattr(instance, field.name)
            for field in fields))
