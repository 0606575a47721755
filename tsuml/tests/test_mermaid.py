"""Tests for Mermaid class-diagram generation."""

from tsuml.core import RenderOptions, convert, generate_documentation_from_sources

SOURCE = '''
export interface Named { name: string; }
export abstract class Shape<T> implements Named {
    name = "shape";
    static count = 0;
    abstract area(): number;
    protected scale(factor?: number): void {}
}
export class Circle extends Shape<number> {
    radius: number;
    area(): number { return 1; }
}
export enum Kind { Round, Square }
export function make(kind: Kind): Shape<number> { return new Circle(); }
'''


def _mermaid(sources, **options) -> str:
    files = generate_documentation_from_sources(sources)
    return convert(files, RenderOptions(format="mermaid", **options))


class TestMermaidBlocks:
    def test_full_document(self):
        assert _mermaid({"shapes.ts": SOURCE}) == "\n".join([
            "classDiagram",
            "    class Named {",
            "        <<interface>>",
            "        +name: string",
            "    }",
            "    class Shape~T~ {",
            "        <<abstract>>",
            "        +name: string",
            "        +area()* number",
            "        #scale(factor?: number) void",
            "        +count: number$",
            "    }",
            "    class Circle {",
            "        +radius: number",
            "        +area() number",
            "    }",
            "    class Kind {",
            "        <<enumeration>>",
            "        Round",
            "        Square",
            "    }",
            '    class shapes_functions["shapes functions"] {',
            "        <<functions>>",
            "        +make(kind: Kind) Shape<number>",
            "    }",
            "    Named <|.. Shape",
            "    Shape <|-- Circle",
        ])

    def test_namespaces(self):
        output = _mermaid({"a.ts": "namespace Geo {\n    export class Point {}\n}\n"})
        assert output == "\n".join([
            "classDiagram",
            "    namespace Geo {",
            "        class Point {",
            "        }",
            "    }",
        ])

    def test_interface_extends(self):
        output = _mermaid({"a.ts": "interface A {}\ninterface B extends A {}\n"})
        assert output.endswith("    A <|-- B")

    def test_empty(self):
        assert convert([], RenderOptions(format="mermaid")) == "classDiagram"


class TestMermaidAssociations:
    ZOO = '''
export class Animal {}
export class Keeper {
    favourite: Animal;
    animals: Animal[];
}
'''

    def test_class_level(self):
        output = _mermaid({"zoo.ts": self.ZOO}, associations=True)
        assert output.endswith("\n".join([
            "    Keeper --> Animal",
            '    Keeper --> "*" Animal',
        ]))

    def test_member_level_labels(self):
        output = _mermaid({"zoo.ts": self.ZOO}, field_associations=True)
        assert output.endswith("\n".join([
            "    Keeper --> Animal : favourite",
            '    Keeper --> "*" Animal : animals',
        ]))

    def test_colors_are_ignored(self):
        plain = _mermaid({"zoo.ts": self.ZOO}, associations=True)
        colored = _mermaid({"zoo.ts": self.ZOO}, associations=True, colored_association_lines=True)
        assert plain == colored
