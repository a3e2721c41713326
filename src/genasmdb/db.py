import argparse
import contextlib
import os
import pprint
import sys

import mdis.dispatcher
import mdis.visitor

from genasmdb.core import (
    Attribute,
    Database,
    Dataclass,
    Extension,
    Instruction,
    Registers,
    Shortcut,
    SpecialRegister,
    Walker,
    decode,
)
from genasmdb.exceptions import (
    GenAsmDBError,
    ResourceReadError,
)
from genasmdb.extract import (
    JSON_BEGIN,
    JSON_END,
    extract,
)
from genasmdb.util import log


def find_asmdb_dir():
    filedir = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(filedir, "asmdb")


def find_asmdb_file(name="x86data.js"):
    return os.path.join(find_asmdb_dir(), name)


class DumpConfig(Dataclass):
    indent: int = 2
    width: int = 80
    depth: int = 4
    sort_keys: bool = True
    compact: bool = False

    def format(self, obj):
        return pprint.pformat(obj,
            indent=self.indent,
            width=self.width,
            depth=self.depth,
            compact=self.compact,
            sort_dicts=self.sort_keys)


def load(path=None):
    if path is None:
        path = find_asmdb_file()
    try:
        with open(path, "rb") as stream:
            content = stream.read()
    except OSError as error:
        raise ResourceReadError(path, error.strerror) from error
    log("load", path, len(content), "bytes")
    return content


def generate(content):
    try:
        data = extract(content, JSON_BEGIN, JSON_END)
    except GenAsmDBError as error:
        raise error.wrap("parse asmdb data") from error

    try:
        return decode(data)
    except GenAsmDBError as error:
        raise error.wrap("decode x86 data") from error


def dump(db, config=DumpConfig()):
    (db, insns) = db.detach()
    return (f"x86asm: {config.format(db)}\n"
            f"Instructions: {config.format(list(insns))}\n")


class ListVisitor(mdis.visitor.ContextVisitor):
    def __init__(self, db):
        self.__seen = set()
        return super().__init__()

    @mdis.dispatcher.Hook(Instruction)
    @contextlib.contextmanager
    def dispatch_instruction(self, instance):
        if instance.name not in self.__seen:
            self.__seen.add(instance.name)
            print(instance.name)
        yield instance


class InstructionVisitor(mdis.visitor.ContextVisitor):
    def __init__(self, db):
        self.__db = db
        return super().__init__()

    @mdis.dispatcher.Hook(Instruction)
    @contextlib.contextmanager
    def dispatch_instruction(self, instance):
        print(instance.name, instance.operands)
        print("    encoding:", instance.encoding)
        print("    opcode:", instance.opcode)
        print("    metadata:", self.__db.expand(instance.metadata))
        yield instance


class ArchitecturesVisitor(mdis.visitor.ContextVisitor):
    def __init__(self, db):
        return super().__init__()

    @mdis.dispatcher.Hook(Database)
    @contextlib.contextmanager
    def dispatch_database(self, instance):
        for architecture in instance.architectures:
            print(architecture)
        yield instance


class ExtensionsVisitor(mdis.visitor.ContextVisitor):
    def __init__(self, db):
        return super().__init__()

    @mdis.dispatcher.Hook(Extension)
    @contextlib.contextmanager
    def dispatch_extension(self, instance):
        print(instance.name)
        yield instance


class AttributesVisitor(mdis.visitor.ContextVisitor):
    def __init__(self, db):
        return super().__init__()

    @mdis.dispatcher.Hook(Attribute)
    @contextlib.contextmanager
    def dispatch_attribute(self, instance):
        print(instance.name, instance.type)
        yield instance


class SpecialRegistersVisitor(mdis.visitor.ContextVisitor):
    def __init__(self, db):
        return super().__init__()

    @mdis.dispatcher.Hook(SpecialRegister)
    @contextlib.contextmanager
    def dispatch_special_register(self, instance):
        print(instance.name, instance.group)
        yield instance


class ShortcutsVisitor(mdis.visitor.ContextVisitor):
    def __init__(self, db):
        return super().__init__()

    @mdis.dispatcher.Hook(Shortcut)
    @contextlib.contextmanager
    def dispatch_shortcut(self, instance):
        print(instance.name, instance.expand)
        yield instance


class RegistersVisitor(mdis.visitor.ContextVisitor):
    def __init__(self, db):
        return super().__init__()

    @mdis.dispatcher.Hook(Registers)
    @contextlib.contextmanager
    def dispatch_registers(self, instance):
        for (key, regclass) in instance.classes():
            print(key, regclass.kind, " ".join(regclass.names))
        yield instance


def main(argv=None):
    commands = {
        "dump": (
            None,
            "print the database and its instructions (default)",
        ),
        "list": (
            ListVisitor,
            "list available instructions",
        ),
        "insn": (
            InstructionVisitor,
            "print every form of an instruction",
        ),
        "architectures": (
            ArchitecturesVisitor,
            "print architectures",
        ),
        "extensions": (
            ExtensionsVisitor,
            "print extensions",
        ),
        "attributes": (
            AttributesVisitor,
            "print attributes",
        ),
        "special-regs": (
            SpecialRegistersVisitor,
            "print special registers",
        ),
        "shortcuts": (
            ShortcutsVisitor,
            "print metadata shortcuts",
        ),
        "registers": (
            RegistersVisitor,
            "print register classes",
        ),
    }

    main_parser = argparse.ArgumentParser(prog="genasmdb")
    main_parser.add_argument("-l", "--log",
        help="activate logging",
        action="store_true",
        default=False)
    main_parser.add_argument("-f", "--file",
        help="asmdb data file (default: bundled x86data.js)",
        default=None)
    main_subparser = main_parser.add_subparsers(dest="command")

    for (command, (visitor, helper)) in commands.items():
        parser = main_subparser.add_parser(command, help=helper)
        if visitor is InstructionVisitor:
            parser.add_argument("insn",
                metavar="INSN", help="instruction")

    args = vars(main_parser.parse_args(argv))
    command = args.pop("command")
    if command is None:
        command = "dump"
    log_enabled = args.pop("log")
    if not log_enabled:
        os.environ["SILENCELOG"] = "true"
    path = args.pop("file")
    if path is None:
        path = find_asmdb_file()

    try:
        db = generate(load(path))
    except GenAsmDBError as error:
        print(f"genasmdb: {path}: {error.__class__.__name__}: {error}",
            file=sys.stderr)
        return 1

    if command == "dump":
        sys.stdout.write(dump(db, DumpConfig()))
        return 0

    visitor = commands[command][0](db)
    if command == "insn":
        name = args.pop("insn")
        root = db[name]
        if not root:
            print(f"genasmdb: unknown instruction {name!r}", file=sys.stderr)
            return 1
    elif command == "list":
        root = tuple(db)
    else:
        root = [db]

    walker = Walker()
    for (node, *_) in walker(root):
        with visitor(node):
            pass

    return 0


if __name__ == "__main__":
    sys.exit(main())
