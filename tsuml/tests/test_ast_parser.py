"""Tests for the AST parser module: parsing, binding and program construction."""

import os

import pytest
from tsuml.core.ast_parser import (
    CompilerOptions,
    DeclarationKind,
    InMemoryCompilerHost,
    Program,
    SymbolFlags,
    create_program,
    create_program_from_sources,
    detect_dialect,
    is_declaration_file,
    parse_source,
)
from tsuml.core.ast_parser.binder import unwrap_statement

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


# =========================================================================
# Sample TypeScript source fixtures
# =========================================================================

GREETER = '''
class Greeter {
    greeting: string;
    constructor(message: string) {
        this.greeting = message;
    }
    greet() {
        return "Hello, " + this.greeting;
    }
}
'''

MODULE_WITH_IMPORTS = '''
import { Vector } from './Vector';
import * as colors from "./Color";
export { Ray } from './Ray';
export * from './Thing';

export class Scene {}
'''

CLASS_MEMBERS = '''
export class Account {
    static count = 0;
    private balance: number = 0;
    constructor(public readonly owner: string, id: number) {}
    get total(): number { return this.balance; }
    set total(value: number) { this.balance = value; }
    deposit(amount: number): void {}
    static create(): Account { return new Account("x", 1); }
}
'''

MERGED_DECLARATIONS = '''
interface Shape { area(): number; }
interface Shape { name: string; }

namespace Geometry {
    export class Point {}
    class Hidden {}
}
'''

ENUM_SOURCE = '''
export enum Direction {
    Up = 1,
    Down,
    Left = "LEFT",
}
'''


# =========================================================================
# Dialect detection
# =========================================================================


class TestDialectDetection:
    def test_typescript_extensions(self):
        assert detect_dialect("a.ts") == "typescript"
        assert detect_dialect("a.mts") == "typescript"
        assert detect_dialect("component.tsx") == "tsx"

    def test_unsupported_extension(self):
        assert detect_dialect("main.py") is None
        assert detect_dialect("README") is None

    def test_declaration_files(self):
        assert is_declaration_file("lib.d.ts")
        assert not is_declaration_file("lib.ts")


# =========================================================================
# Parsing
# =========================================================================


class TestParseSource:
    def test_parses_clean_source(self):
        source_file = parse_source(GREETER, "greeter.ts")
        assert source_file.file_name == "greeter.ts"
        assert source_file.root_node.type == "program"
        assert not source_file.has_parse_errors

    def test_module_specifiers_in_order(self):
        source_file = parse_source(MODULE_WITH_IMPORTS, "scene.ts")
        assert source_file.module_specifiers == ["./Vector", "./Color", "./Ray", "./Thing"]

    def test_require_import_specifier(self):
        source_file = parse_source("import fs = require('fs');\n", "a.ts")
        assert source_file.module_specifiers == ["fs"]

    def test_parse_errors_are_flagged(self):
        source_file = parse_source("class {{{ \n", "broken.ts")
        assert source_file.has_parse_errors

    def test_declaration_file_flag(self):
        source_file = parse_source("declare class Foo {}\n", "types.d.ts")
        assert source_file.is_declaration_file


class TestUnwrapStatement:
    def test_export_statement(self):
        source_file = parse_source("export class A {}\n", "a.ts")
        node, exported = unwrap_statement(source_file.root_node.named_children[0])
        assert node.type == "class_declaration"
        assert exported

    def test_plain_declaration(self):
        source_file = parse_source("interface I {}\n", "a.ts")
        node, exported = unwrap_statement(source_file.root_node.named_children[0])
        assert node.type == "interface_declaration"
        assert not exported

    def test_expression_is_not_a_declaration(self):
        source_file = parse_source("console.log(1);\n", "a.ts")
        node, _ = unwrap_statement(source_file.root_node.named_children[0])
        assert node is None


# =========================================================================
# Binding
# =========================================================================


def _bind(source: str, file_name: str = "main.ts"):
    program = create_program_from_sources({file_name: source})
    return program, program.get_source_file(file_name)


class TestBinder:
    def test_script_declarations_are_global(self):
        program, source_file = _bind(GREETER)
        assert not source_file.is_external_module
        assert "Greeter" in program.binder.globals

    def test_module_exports(self):
        _, source_file = _bind(CLASS_MEMBERS)
        assert source_file.is_external_module
        assert list(source_file.symbol.exports) == ["Account"]

    def test_class_members_and_statics(self):
        _, source_file = _bind(CLASS_MEMBERS)
        account = source_file.symbol.exports["Account"]
        assert list(account.members) == ["balance", "__constructor", "owner", "total", "deposit"]
        assert list(account.exports) == ["count", "create"]

    def test_accessor_pair_merges(self):
        _, source_file = _bind(CLASS_MEMBERS)
        total = source_file.symbol.exports["Account"].members["total"]
        kinds = [d.kind for d in total.declarations]
        assert kinds == [DeclarationKind.GET_ACCESSOR, DeclarationKind.SET_ACCESSOR]

    def test_parameter_property_is_a_member(self):
        _, source_file = _bind(CLASS_MEMBERS)
        owner = source_file.symbol.exports["Account"].members["owner"]
        assert owner.value_declaration.kind == DeclarationKind.PARAMETER

    def test_interface_declarations_merge(self):
        program, _ = _bind(MERGED_DECLARATIONS)
        shape = program.binder.globals["Shape"]
        assert len(shape.declarations) == 2
        assert list(shape.members) == ["area", "name"]

    def test_namespace_exports(self):
        program, _ = _bind(MERGED_DECLARATIONS)
        geometry = program.binder.globals["Geometry"]
        assert geometry.has_flag(SymbolFlags.NAMESPACE)
        assert list(geometry.exports) == ["Point"]

    def test_enum_members(self):
        _, source_file = _bind(ENUM_SOURCE)
        direction = source_file.symbol.exports["Direction"]
        assert list(direction.exports) == ["Up", "Down", "Left"]
        assert all(m.has_flag(SymbolFlags.ENUM_MEMBER) for m in direction.exports.values())

    def test_imports_are_aliases(self):
        program = create_program_from_sources({
            "a.ts": "export class A {}\n",
            "b.ts": "import { A as Base } from './a';\nexport class B extends Base {}\n",
        })
        b = program.get_source_file("b.ts")
        base = b.symbol.declarations[0].locals["Base"]
        assert base.has_flag(SymbolFlags.ALIAS)
        assert base.meta["import_name"] == "A"


# =========================================================================
# Program
# =========================================================================


class TestProgram:
    def test_dependencies_come_first(self):
        program = create_program([os.path.join(FIXTURES, "inheritance", "index.ts")])
        names = [os.path.basename(sf.file_name) for sf in program.get_source_files()]
        assert names == ["Animal.ts", "Horse.ts", "Snake.ts", "index.ts"]

    def test_each_file_once(self):
        program = create_program_from_sources({
            "a.ts": "import { B } from './b';\nimport { C } from './c';\n",
            "b.ts": "import { C } from './c';\nexport class B {}\n",
            "c.ts": "export class C {}\n",
        })
        names = [sf.file_name for sf in program.get_source_files()]
        assert names == ["c.ts", "b.ts", "a.ts"]

    def test_unresolved_module_is_skipped(self):
        program = create_program_from_sources({
            "a.ts": "import { x } from 'lodash';\nimport { y } from './missing';\n",
        })
        assert [sf.file_name for sf in program.get_source_files()] == ["a.ts"]

    def test_js_extension_maps_to_ts(self):
        program = create_program_from_sources({
            "a.ts": "import { B } from './b.js';\n",
            "b.ts": "export class B {}\n",
        })
        assert program.resolve_module("./b.js", "a.ts") == "b.ts"

    def test_explicit_ts_extension(self):
        program = create_program_from_sources({
            "a.ts": "import { B } from './b.ts';\n",
            "b.ts": "export class B {}\n",
        })
        assert program.resolve_module("./b.ts", "a.ts") == "b.ts"

    def test_non_typescript_import_is_not_loaded(self):
        host = InMemoryCompilerHost({
            "a.ts": "import './styles.css';\n",
            "styles.css": "body {}\n",
        })
        program = Program(["a.ts"], CompilerOptions(), host)
        assert program.resolve_module("./styles.css", "a.ts") is None
        assert [sf.file_name for sf in program.get_source_files()] == ["a.ts"]

    def test_directory_index(self):
        program = create_program_from_sources({
            "a.ts": "import { B } from './lib';\n",
            os.path.join("lib", "index.ts"): "export class B {}\n",
        })
        assert program.resolve_module("./lib", "a.ts") == os.path.join("lib", "index.ts")

    def test_paths_mapping(self):
        options = CompilerOptions(base_url="src", paths={"@models/*": ["models/*"]})
        host = InMemoryCompilerHost({
            os.path.join("src", "main.ts"): "import { User } from '@models/User';\n",
            os.path.join("src", "models", "User.ts"): "export interface User {}\n",
        })
        program = Program([os.path.join("src", "main.ts")], options, host)
        names = [sf.file_name for sf in program.get_source_files()]
        assert names == [os.path.join("src", "models", "User.ts"), os.path.join("src", "main.ts")]

    def test_missing_root_file_raises(self):
        with pytest.raises(OSError):
            create_program([os.path.join(FIXTURES, "does-not-exist.ts")])

    def test_compiler_options_from_dict(self):
        options = CompilerOptions.from_dict({"baseUrl": "./src", "paths": {"@/*": ["*"]}}, "/project")
        assert options.base_url == os.path.normpath("/project/src")
        assert options.paths == {"@/*": ["*"]}

    def test_paths_without_base_url_use_config_dir(self):
        options = CompilerOptions.from_dict({"paths": {"@/*": ["*"]}}, "/project")
        assert options.base_url == os.path.normpath("/project")
